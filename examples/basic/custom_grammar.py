"""Define a grammar as plain data and inspect its tokens."""

from scopelex import load_grammar, tokenize

grammar = load_grammar(
    {
        "name": "INI",
        "scope": "source.ini",
        "contexts": {
            "main": [
                {"match": r";.*", "scope": "comment.line.ini"},
                {"match": r"\[", "scope": "punctuation.section.begin.ini", "push": "section"},
                {
                    "match": r"(\w+)\s*(=)",
                    "captures": {"1": "variable.other.key.ini", "2": "keyword.operator.ini"},
                },
                {"match": r"\s+"},
                {"match": r"\S+", "scope": "string.unquoted.ini"},
            ],
            "section": [
                {"meta_scope": "meta.section.ini"},
                {"match": r"\]", "scope": "punctuation.section.end.ini", "pop": True},
                {"match": r"[^\]\n]+", "scope": "entity.name.section.ini"},
            ],
        },
    }
)

for token in tokenize("[server]\nport = 8080 ; default\n", grammar):
    print(f"{token.value!r:12} {token.kind.name:6} {' '.join(token.scopes)}")
