"""Highlight SFLK source in 3 lines — zero config, zero deps."""

from scopelex import get_grammar, highlight

html = highlight("pr (1 + 2) # sum #", get_grammar("sflk"), include_root=False)
print(html)
