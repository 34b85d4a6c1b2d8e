from langchain_core.prompts import ChatPromptTemplate


opposite_pairs_prompt = ChatPromptTemplate.from_template(
    """
Task: Given a list of labels in the category "{category}", pair two labels l_1 and l_2
together if and only if l_1 and l_2 express opposing meaning or viewpoints within "{category}".

Pairing Guidelines:
1. Only use labels that appear in the list. Copy them exactly, including case.
2. A label may appear in more than one pair.
3. A label cannot be paired with itself.
4. Return an empty list of pairs if no labels oppose each other.

===Labels===
```
{labels}
```

Respond using the structured output schema provided by your tool: a list of pairs,
each with a "first" and "second" label. Include no extra commentary.
"""
)


__all__ = [
    "opposite_pairs_prompt",
]
