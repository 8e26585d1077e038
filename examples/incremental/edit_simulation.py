"""Re-lex only what changed — O(change) not O(document)."""

from scopelex import get_grammar, retokenize, tokenize_document

grammar = get_grammar("sflk")

original = "pr 1\n(2 + 3)\n# note #\nnl\n"
doc = tokenize_document(original, grammar)

# User edits "2" -> "42" on line 2
edit_start = original.index("2")
edit_end = edit_start + 1
new_source = original[:edit_start] + "42" + original[edit_end:]
new_length = 2

new_doc = retokenize(new_source, doc, grammar, edit_start, edit_end, new_length)

print("Original lines:", doc.line_count)
print("New lines:", new_doc.line_count)
print()
print("Line 1 unchanged (same object?):", doc.line_tokens(1)[0] is new_doc.line_tokens(1)[0])
print("Line 4 shifted by one:", new_doc.line_tokens(4)[0].start - doc.line_tokens(4)[0].start)

# Opening a comment changes the stack for every following line
commented = "#" + original
new_doc = retokenize(commented, doc, grammar, 0, 0, 1)
print("Line 2 stack after edit:", " > ".join(new_doc.line_states[1].stack))
