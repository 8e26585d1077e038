"""Free-threading safe — tokenize 1000 docs in parallel with one grammar."""

from concurrent.futures import ThreadPoolExecutor

from scopelex import get_grammar, tokenize_document

grammar = get_grammar("sflk")
docs = [f"ev {i} > x\n# doc {i} #\n(x * {i})\n" for i in range(1000)]

with ThreadPoolExecutor(max_workers=8) as ex:
    results = list(ex.map(lambda source: tokenize_document(source, grammar), docs))

print(f"Tokenized {len(results)} documents in parallel")
print("First doc tokens:", len(results[0].tokens))
print("Last doc tokens:", len(results[-1].tokens))
