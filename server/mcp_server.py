# DocDesk MCP Server - JSON-RPC 2.0 over stdio
# Serves internal documentation search and external library doc fetching as MCP tools/resources

import sys, json, re, asyncio, logging, argparse
from typing import Dict, Any, List, Optional

from config.settings import Settings, settings as default_settings
from indexer.doc_store import DocumentStore, DocumentNotFound
from indexer.models import Document, SearchQuery
from indexer.search import SearchEngine
from observability.logging import setup_logging
from observability.prometheus_metrics import record_tool_call, set_app_info
from pipelines.library_docs import LibraryDocFetcher, SourceNotFound, FetchFailed
from sources.registry import LibrarySourceRegistry
from server import rendering
from server.schemas import (
    InvalidRequest,
    SearchDocsArgs,
    GetDocArgs,
    AddDocArgs,
    DeleteDocArgs,
    FetchLibraryDocsArgs,
    AddLibrarySourceArgs,
    NoArgs,
    parse_arguments,
    input_schema,
)

logger = logging.getLogger(__name__)

PROTOCOL_VERSION = "2024-11-05"
RESOURCE_URI_PREFIX = "doc://internal/"
RESOURCE_URI_RE = re.compile(r"^doc://internal/(.+)$")
RESOURCES_PAGE_SIZE = 50

# JSON-RPC error codes
PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603
RESOURCE_NOT_FOUND = -32002

TOOLS = [
    ("search-docs",
     "Search through internal documentation. Returns relevant documents based on query, category, and tags.",
     SearchDocsArgs),
    ("get-doc",
     "Get full documentation by ID. Returns the complete content of a specific document.",
     GetDocArgs),
    ("list-categories",
     "List all available documentation categories.",
     NoArgs),
    ("add-doc",
     "Add or update documentation. Stores a new document or updates an existing one.",
     AddDocArgs),
    ("delete-doc",
     "Delete a document by ID.",
     DeleteDocArgs),
    ("fetch-library-docs",
     "Fetch official documentation from online sources for libraries and frameworks "
     "(LangGraph, React, FastAPI, etc.). Retrieves up-to-date documentation from the web.",
     FetchLibraryDocsArgs),
    ("list-available-libraries",
     "List all libraries that have known documentation sources configured.",
     NoArgs),
    ("add-library-source",
     "Register or replace the documentation URL used for a library.",
     AddLibrarySourceArgs),
]


class MethodNotFound(Exception):
    pass


def text_result(text: str, is_error: bool = False) -> Dict[str, Any]:
    result: Dict[str, Any] = {"content": [{"type": "text", "text": text}]}
    if is_error:
        result["isError"] = True
    return result


class MCPServer:
    def __init__(self,
                 store: DocumentStore,
                 registry: LibrarySourceRegistry,
                 fetcher: Optional[LibraryDocFetcher] = None,
                 engine: Optional[SearchEngine] = None,
                 server_info: Optional[Dict[str, str]] = None,
                 default_limit: Optional[int] = None,
                 resource_page_size: int = RESOURCES_PAGE_SIZE):
        self.store = store
        self.registry = registry
        self.fetcher = fetcher or LibraryDocFetcher(registry)
        self.engine = engine or SearchEngine(store)
        self.capabilities = {
            "resources": {},
            "tools": {}
        }
        self.server_info = server_info or default_settings.get_server_info()
        self.default_limit = default_limit or default_settings.get_default_limit()
        self.resource_page_size = resource_page_size
        self.session_initialized = False
        self._tool_handlers = {
            "search-docs": self._tool_search_docs,
            "get-doc": self._tool_get_doc,
            "list-categories": self._tool_list_categories,
            "add-doc": self._tool_add_doc,
            "delete-doc": self._tool_delete_doc,
            "fetch-library-docs": self._tool_fetch_library_docs,
            "list-available-libraries": self._tool_list_available_libraries,
            "add-library-source": self._tool_add_library_source,
        }

    async def handle_initialize(self, params: Dict[str, Any]) -> Dict[str, Any]:
        """Handle MCP initialize request"""
        client_info = params.get("clientInfo", {})
        logger.info(f"Initializing MCP session with client: {client_info.get('name', 'unknown')}")

        return {
            "protocolVersion": PROTOCOL_VERSION,
            "capabilities": self.capabilities,
            "serverInfo": self.server_info
        }

    async def handle_initialized(self, params: Dict[str, Any]) -> None:
        """Handle MCP initialized notification"""
        self.session_initialized = True
        logger.info("MCP session initialized successfully")

    async def handle_resources_list(self, params: Dict[str, Any]) -> Dict[str, Any]:
        """List internal documents as resources, ordered by id.

        Pages hold ``resource_page_size`` entries; the cursor is the id of the
        last resource on the previous page.
        """
        cursor = params.get("cursor")
        if cursor is not None and not isinstance(cursor, str):
            raise InvalidRequest("cursor must be a string")

        summaries = sorted(self.store.get_summaries(), key=lambda s: s.id)
        if cursor:
            summaries = [s for s in summaries if s.id > cursor]
        page = summaries[:self.resource_page_size]

        result: Dict[str, Any] = {
            "resources": [{
                "uri": f"{RESOURCE_URI_PREFIX}{summary.id}",
                "name": summary.title,
                "description": summary.description,
                "mimeType": "text/markdown"
            } for summary in page]
        }
        if len(summaries) > len(page):
            result["nextCursor"] = page[-1].id
        return result

    async def handle_resources_read(self, params: Dict[str, Any]) -> Dict[str, Any]:
        """Read a document resource by doc://internal/<id> URI"""
        uri = params.get("uri", "")
        match = RESOURCE_URI_RE.match(uri) if isinstance(uri, str) else None
        if not match:
            raise InvalidRequest(f"Invalid resource URI: {uri}")

        doc = self.store.get_by_id(match.group(1))
        if doc is None:
            raise DocumentNotFound(match.group(1))

        return {
            "contents": [{
                "uri": uri,
                "mimeType": "text/markdown",
                "text": rendering.render_document(doc)
            }]
        }

    async def handle_tools_list(self, params: Dict[str, Any]) -> Dict[str, Any]:
        """List available MCP tools"""
        return {
            "tools": [
                {"name": name, "description": description, "inputSchema": input_schema(model)}
                for name, description, model in TOOLS
            ]
        }

    async def handle_tools_call(self, params: Dict[str, Any]) -> Dict[str, Any]:
        """Execute MCP tool calls"""
        name = params.get("name")
        arguments = params.get("arguments")

        handler = self._tool_handlers.get(name) if isinstance(name, str) else None
        if handler is None:
            raise InvalidRequest(f"Unknown tool: {name}")

        try:
            result = await handler(arguments)
        except InvalidRequest:
            record_tool_call(name, error=True)
            raise
        record_tool_call(name, error=bool(result.get("isError")))
        return result

    async def _tool_search_docs(self, arguments: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        args = parse_arguments("search-docs", SearchDocsArgs, arguments)
        limit = args.limit if args.limit is not None else self.default_limit
        query = SearchQuery(text=args.query, category=args.category, tags=args.tags, limit=limit)
        hits = self.engine.search(query)
        return text_result(rendering.render_search_results(args.query, hits))

    async def _tool_get_doc(self, arguments: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        args = parse_arguments("get-doc", GetDocArgs, arguments)
        doc = self.store.get_by_id(args.id)
        if doc is None:
            return text_result(str(DocumentNotFound(args.id)), is_error=True)
        return text_result(rendering.render_document(doc))

    async def _tool_list_categories(self, arguments: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        parse_arguments("list-categories", NoArgs, arguments)
        return text_result(rendering.render_categories(self.store.get_categories()))

    async def _tool_add_doc(self, arguments: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        args = parse_arguments("add-doc", AddDocArgs, arguments)
        stored = self.store.upsert(Document(
            id=args.id,
            title=args.title,
            description=args.description,
            content=args.content,
            category=args.category,
            tags=args.tags,
            version=args.version,
        ))
        logger.info(f"Stored document {stored.id!r}")
        return text_result(
            f'Documentation "{stored.title}" (ID: {stored.id}) has been added/updated successfully.'
        )

    async def _tool_delete_doc(self, arguments: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        args = parse_arguments("delete-doc", DeleteDocArgs, arguments)
        if not self.store.delete(args.id):
            return text_result(str(DocumentNotFound(args.id)), is_error=True)
        logger.info(f"Deleted document {args.id!r}")
        return text_result(f"Documentation {args.id} has been deleted.")

    async def _tool_fetch_library_docs(self, arguments: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        args = parse_arguments("fetch-library-docs", FetchLibraryDocsArgs, arguments)
        try:
            result = self.fetcher.fetch_library_docs(args.library, args.query)
        except (SourceNotFound, FetchFailed) as e:
            return text_result(
                rendering.render_library_error(args.library, e, self.registry.list_names()),
                is_error=True
            )
        return text_result(rendering.render_library_docs(result, args.query))

    async def _tool_list_available_libraries(self, arguments: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        parse_arguments("list-available-libraries", NoArgs, arguments)
        return text_result(rendering.render_libraries(self.registry.list_names()))

    async def _tool_add_library_source(self, arguments: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        args = parse_arguments("add-library-source", AddLibrarySourceArgs, arguments)
        key = self.registry.register(args.library, args.url)
        return text_result(f'Library "{key}" now fetches documentation from {args.url}.')

    async def handle_request(self, request_data: Any) -> Optional[Dict[str, Any]]:
        """Main request handler following JSON-RPC 2.0 spec

        Notifications (no ``id``) never get a reply, not even an error one.
        Malformed envelopes are still answered with a null id.
        """
        request_id = request_data.get("id") if isinstance(request_data, dict) else None
        is_notification = isinstance(request_data, dict) and "id" not in request_data
        try:
            if not isinstance(request_data, dict) or request_data.get("jsonrpc") != "2.0":
                return self._error_response(request_id, INVALID_REQUEST, "Invalid JSON-RPC request")

            method = request_data.get("method")
            params = request_data.get("params") or {}

            if not isinstance(method, str) or not method:
                return self._error_response(request_id, INVALID_REQUEST, "Missing method")
            if not isinstance(params, dict):
                raise InvalidRequest("params must be an object")

            if method in ("initialized", "notifications/initialized"):
                await self.handle_initialized(params)
                return None
            if method.startswith("notifications/"):
                return None

            result = await self._dispatch(method, params)
            if is_notification:
                return None

            return {
                "jsonrpc": "2.0",
                "id": request_id,
                "result": result
            }

        except MethodNotFound as e:
            code, message = METHOD_NOT_FOUND, str(e)
        except InvalidRequest as e:
            logger.warning(f"Rejected request: {e}")
            code, message = INVALID_PARAMS, str(e)
        except DocumentNotFound as e:
            code, message = RESOURCE_NOT_FOUND, str(e)
        except Exception as e:
            logger.exception(f"Error handling request: {e}")
            code, message = INTERNAL_ERROR, str(e)

        if is_notification:
            logger.debug(f"Dropping error for notification: {message}")
            return None
        return self._error_response(request_id, code, message)

    async def _dispatch(self, method: str, params: Dict[str, Any]) -> Dict[str, Any]:
        if method == "initialize":
            return await self.handle_initialize(params)
        elif method == "ping":
            return {}
        elif method == "resources/list":
            return await self.handle_resources_list(params)
        elif method == "resources/read":
            return await self.handle_resources_read(params)
        elif method == "tools/list":
            return await self.handle_tools_list(params)
        elif method == "tools/call":
            return await self.handle_tools_call(params)
        raise MethodNotFound(f"Unknown method: {method}")

    @staticmethod
    def _error_response(request_id: Any, code: int, message: str) -> Dict[str, Any]:
        return {
            "jsonrpc": "2.0",
            "id": request_id,
            "error": {
                "code": code,
                "message": message
            }
        }


def create_server(config: Optional[Settings] = None) -> MCPServer:
    """Build a server with the seed documents and library sources from config."""
    config = config or default_settings
    seeds = config.get_seed_paths()
    store = DocumentStore.from_seed_file(seeds['documents'])
    registry = LibrarySourceRegistry.from_yaml(seeds['libraries'])
    server_info = config.get_server_info()
    return MCPServer(
        store=store,
        registry=registry,
        fetcher=LibraryDocFetcher(registry, config.get_fetch_settings()),
        engine=SearchEngine(
            store,
            weights=config.get_search_weights(),
            excerpt_before=config.get_excerpt_window()['before'],
            excerpt_after=config.get_excerpt_window()['after'],
        ),
        server_info=server_info,
        default_limit=config.get_default_limit(),
    )


async def serve_stdio(server: MCPServer, stdin=None, stdout=None) -> None:
    """Read newline-delimited JSON-RPC requests until EOF."""
    stdin = stdin or sys.stdin
    stdout = stdout or sys.stdout
    logger.info("Starting MCP server in stdio mode")

    while True:
        line = stdin.readline()
        if not line:
            break
        if not line.strip():
            continue

        try:
            request_data = json.loads(line)
        except json.JSONDecodeError as e:
            response = MCPServer._error_response(None, PARSE_ERROR, f"Parse error: {e}")
        else:
            response = await server.handle_request(request_data)

        if response:  # Don't send response for notifications
            stdout.write(json.dumps(response) + "\n")
            stdout.flush()

    logger.info("stdin closed, MCP server stopping")


async def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point for MCP server"""
    parser = argparse.ArgumentParser(description="DocDesk MCP server")
    parser.add_argument("--stdio", action="store_true", help="Serve JSON-RPC over stdio")
    parser.add_argument("--config", help="Path to a docdesk.yaml configuration file")
    parser.add_argument("--log-level", help="Override the configured log level")
    args = parser.parse_args(argv)

    config = Settings(args.config) if args.config else default_settings
    log_settings = config.get_logging_settings()
    setup_logging(
        level=args.log_level or log_settings['level'],
        service_name=config.get_server_info()['name'],
        log_file=log_settings['log_file'],
        use_json=log_settings['use_json'],
    )

    server = create_server(config)
    set_app_info(server.server_info['name'], server.server_info['version'])

    if args.stdio:
        await serve_stdio(server)
    else:
        # Describe mode for manual checks
        print(f"{server.server_info['name']} {server.server_info['version']}")
        print("Usage: docdesk-server --stdio")
        print("\nAvailable resources:")
        result = await server.handle_resources_list({})
        for resource in result["resources"]:
            print(f"  - {resource['name']} ({resource['uri']})")
        print(f"\nLibrary sources: {', '.join(server.registry.list_names())}")


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()
