"""Analysis engine: runs registered checkers over Go files."""
