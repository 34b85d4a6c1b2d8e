from typing import Sequence

from langchain_core.prompts import ChatPromptTemplate


def render_labels(labels: Sequence[str]) -> str:
    if not labels:
        return "(none)"
    return "\n".join(f"- {label}" for label in labels)


def render_categories(categories: Sequence[str]) -> str:
    return "\n".join(f"{idx}. {category}" for idx, category in enumerate(categories, start=1))


category_classification_prompt = ChatPromptTemplate.from_messages(
    [
        (
            "system",
            """
You group short video posts into broad topics.
You are given the free-form labels an author attached to one post.
Pick the single category from the list below that best describes the labels as a whole.

===Categories===
{categories}

===Rules===
- Answer with the category name exactly as written in the list, as a JSON string.
- If none of the categories fit, answer "all".
- Do NOT return any explanations or additional text.
""",
        ),
        (
            "human",
            "Here are the labels:\n```\n{labels}\n```",
        ),
    ]
)


__all__ = [
    "category_classification_prompt",
    "render_categories",
    "render_labels",
]
