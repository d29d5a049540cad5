import pytest

from sources.loader import load_library_sources, is_valid_source_url
from sources.registry import LibrarySourceRegistry, normalize_library_name

LANGGRAPH_URL = "https://langchain-ai.github.io/langgraph/"


class TestNormalization:

    @pytest.mark.parametrize("raw,expected", [
        ("LangGraph", "langgraph"),
        ("lang-graph", "langgraph"),
        ("Next.js", "nextjs"),
        ("  Vue 3 ", "vue3"),
        ("@scope/pkg_name", "scopepkgname"),
        ("Ünïcode", "ncode"),
        ("", ""),
    ])
    def test_normalize_library_name(self, raw, expected):
        assert normalize_library_name(raw) == expected


class TestLibrarySourceRegistry:
    """Test library source lookup and registration"""

    @pytest.fixture
    def registry(self):
        return LibrarySourceRegistry({"langgraph": LANGGRAPH_URL, "react": "https://react.dev/learn"})

    def test_resolve_is_normalization_insensitive(self, registry):
        assert registry.resolve("LangGraph") == LANGGRAPH_URL
        assert registry.resolve("lang-graph") == LANGGRAPH_URL
        assert registry.resolve("langgraph") == LANGGRAPH_URL

    def test_resolve_unknown(self, registry):
        assert registry.resolve("svelte") is None

    def test_register_normalizes_and_overwrites(self, registry):
        assert registry.register("Svelte-Kit", "https://kit.svelte.dev/docs") == "sveltekit"
        assert registry.resolve("sveltekit") == "https://kit.svelte.dev/docs"

        registry.register("REACT", "https://react.dev/reference")
        assert registry.resolve("react") == "https://react.dev/reference"
        assert len(registry) == 3

    def test_list_names_sorted(self, registry):
        registry.register("Angular", "https://angular.dev/overview")
        assert registry.list_names() == ["angular", "langgraph", "react"]

    def test_contains(self, registry):
        assert "Lang Graph" in registry
        assert "svelte" not in registry
        assert 42 not in registry

    def test_fallback_urls(self):
        assert LibrarySourceRegistry.fallback_urls("My-Lib") == [
            "https://mylib.readthedocs.io/",
            "https://docs.mylib.com/",
            "https://mylib.org/docs/",
            "https://github.com/mylib/mylib",
        ]

    def test_registries_are_isolated(self, registry):
        other = LibrarySourceRegistry()
        registry.register("svelte", "https://svelte.dev/docs")
        assert other.resolve("svelte") is None
        assert other.list_names() == []


class TestLibrarySourceLoader:
    """Test loading library sources from YAML"""

    def test_packaged_sources(self):
        registry = LibrarySourceRegistry.from_yaml()
        assert len(registry) == 13
        assert registry.resolve("LangGraph") == LANGGRAPH_URL
        assert registry.resolve("Next.js") == "https://nextjs.org/docs"
        assert "crewai" in registry.list_names()

    def test_invalid_urls_skipped(self, tmp_path):
        path = tmp_path / "libraries.yaml"
        path.write_text(
            "libraries:\n"
            "  good: https://good.dev/docs\n"
            "  ftp: ftp://files.example.com/docs\n"
            "  relative: /docs\n"
            "  number: 12\n",
            encoding="utf-8",
        )
        assert load_library_sources(path) == {"good": "https://good.dev/docs"}

    def test_missing_file(self, tmp_path):
        assert load_library_sources(tmp_path / "none.yaml") == {}
        assert len(LibrarySourceRegistry.from_yaml(tmp_path / "none.yaml")) == 0

    def test_wrong_shape(self, tmp_path):
        path = tmp_path / "libraries.yaml"
        path.write_text("- just\n- a list\n", encoding="utf-8")
        assert load_library_sources(path) == {}

    @pytest.mark.parametrize("url,valid", [
        ("https://docs.python.org/3/", True),
        ("http://localhost:8000/docs", True),
        ("file:///etc/passwd", False),
        ("docs.python.org", False),
        ("", False),
    ])
    def test_is_valid_source_url(self, url, valid):
        assert is_valid_source_url(url) is valid
