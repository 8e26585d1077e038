"""Persist a lexer state as JSON and resume tokenizing later."""

from scopelex import Tokenizer, from_json, get_grammar, to_json

grammar = get_grammar("sflk")
head = 'pr "a string\n'
tail = 'that ends here" nl\n'

first = Tokenizer(grammar, head)
for token in first.tokenize():
    print(token)

saved = to_json(first.state)
print("Saved state:", saved)

for token in Tokenizer(grammar, tail, state=from_json(saved)).tokenize():
    print(token)
