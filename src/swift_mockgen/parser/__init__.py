from swift_mockgen.parser.tree_sitter_swift import LANGUAGE, TreeSitterSwiftParser, parse_member

__all__ = [
    "LANGUAGE",
    "TreeSitterSwiftParser",
    "parse_member",
]
