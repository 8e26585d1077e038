"""Grammar for SFLK, a small statement-oriented scripting language.

Lexical surface:
- Two-letter keywords: np pr nl ev do dh fh if th el
- Alphabetic variable names, decimal integers
- Chops: + - * / (arithmetic) and > (to right); < assigns
- Double-quoted strings with \\\\ \\" \\n \\t \\e escapes
- Groups ( ), brackets [ ], blocks { } (nestable)
- Block comments delimited by runs of #

Comment nesting:
A comment opened by a run of k '#' characters (k = 1, 2, 3) is closed only
by a run of exactly k. Inside it, shorter runs open nested comments and
longer runs are plain comment text:

    ### outer ## middle # inner # middle ## outer ###

"""

from typing import Any

_COMMENT_BEGIN = "punctuation.definition.comment.begin.sflk"
_COMMENT_END = "punctuation.definition.comment.end.sflk"
_STRAY_CLOSER = "invalid.illegal.stray-bracket-end.sflk"


def _section(context: str, closer: str, kind: str, meta: str, stray: str) -> dict[str, list[Any]]:
    """A bracketed context: opened from ``expressions``, closed by ``closer``."""
    return {
        context: [
            {"meta_scope": meta},
            {"match": closer, "scope": f"punctuation.section.{kind}.end.sflk", "pop": True},
            {"include": "comments"},
            {"include": "expressions"},
            {"match": stray, "scope": _STRAY_CLOSER},
        ],
    }


SFLK_GRAMMAR: dict[str, Any] = {
    "name": "SFLK",
    "scope": "source.sflk",
    "contexts": {
        "main": [
            {"include": "comments"},
            {"include": "expressions"},
            {"match": r"[\)\]\}]", "scope": _STRAY_CLOSER},
        ],
        "expressions": [
            {"match": r"\s+"},
            {
                "match": r"(?:np|pr|nl|ev|do|dh|fh|if|th|el)(?![A-Za-z])",
                "scope": "keyword.other.sflk",
            },
            {"match": r"[A-Za-z]+", "scope": "variable.other.sflk"},
            {"match": r"[0-9]+", "scope": "constant.numeric.integer.sflk"},
            {"match": r"[+\-*/]", "scope": "keyword.operator.arithmetic.sflk"},
            {"match": r"<", "scope": "keyword.operator.assignment.sflk"},
            {"match": r">", "scope": "keyword.operator.chain.sflk"},
            {"match": r'"', "scope": "punctuation.definition.string.begin.sflk", "push": "string"},
            {"match": r"\(", "scope": "punctuation.section.group.begin.sflk", "push": "group"},
            {"match": r"\[", "scope": "punctuation.section.brackets.begin.sflk", "push": "brackets"},
            {"match": r"\{", "scope": "punctuation.section.block.begin.sflk", "push": "block"},
        ],
        "string": [
            {"meta_scope": "string.quoted.double.sflk"},
            {"match": r'"', "scope": "punctuation.definition.string.end.sflk", "pop": True},
            {"match": r'\\[\\"nte]', "scope": "constant.character.escape.sflk"},
            {"match": r"\\.", "scope": "invalid.illegal.unknown-escape.sflk"},
            {"match": r'[^"\\]+'},
        ],
        "comments": [
            {"match": "###", "scope": _COMMENT_BEGIN, "push": "comment-3"},
            {"match": "##", "scope": _COMMENT_BEGIN, "push": "comment-2"},
            {"match": "#", "scope": _COMMENT_BEGIN, "push": "comment-1"},
        ],
        "comment-1": [
            {"meta_scope": "comment.block.level1.sflk"},
            {"match": "##+"},
            {"match": "#", "scope": _COMMENT_END, "pop": True},
            {"match": "[^#]+"},
        ],
        "comment-2": [
            {"meta_scope": "comment.block.level2.sflk"},
            {"match": "###+"},
            {"match": "##", "scope": _COMMENT_END, "pop": True},
            {"match": "#", "scope": _COMMENT_BEGIN, "push": "comment-1"},
            {"match": "[^#]+"},
        ],
        "comment-3": [
            {"meta_scope": "comment.block.level3.sflk"},
            {"match": "####+"},
            {"match": "###", "scope": _COMMENT_END, "pop": True},
            {"match": "##", "scope": _COMMENT_BEGIN, "push": "comment-2"},
            {"match": "#", "scope": _COMMENT_BEGIN, "push": "comment-1"},
            {"match": "[^#]+"},
        ],
        **_section("group", r"\)", "group", "meta.group.sflk", r"[\]\}]"),
        **_section("brackets", r"\]", "brackets", "meta.brackets.sflk", r"[\)\}]"),
        **_section("block", r"\}", "block", "meta.block.sflk", r"[\)\]]"),
    },
}
