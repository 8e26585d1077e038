"""Verify package imports work correctly."""


def test_import_scopelex() -> None:
    """Test that scopelex can be imported and version matches pyproject."""
    import tomllib
    from pathlib import Path

    import scopelex

    with (Path(__file__).resolve().parent.parent / "pyproject.toml").open("rb") as f:
        expected = tomllib.load(f)["project"]["version"]
    assert scopelex.__version__ == expected


def test_version_format() -> None:
    """Test version string format."""
    from scopelex import __version__

    parts = __version__.split(".")
    assert len(parts) == 3
    assert all(part.isdigit() for part in parts)


def test_public_names_resolve() -> None:
    """Every name in __all__ is importable from the package root."""
    import scopelex

    missing = [name for name in scopelex.__all__ if not hasattr(scopelex, name)]
    assert missing == []


def test_subpackages_import() -> None:
    from scopelex.grammar import load_grammar
    from scopelex.grammars import get_grammar
    from scopelex.lexer import LexState, Tokenizer

    grammar = get_grammar("sflk")
    assert callable(load_grammar)
    assert Tokenizer(grammar, "", state=LexState()).state.offset == 0
