"""Export chats to Markdown and JSON formats."""

import json

from .core import HTML, Chat

FENCE_LANGUAGES = {"html": "html", "react": "jsx", "vue": "vue"}


def chat_to_markdown(chat: Chat, framework: str = HTML) -> str:
    """Export a chat as Markdown, fencing generated code in its language."""
    lang = FENCE_LANGUAGES.get(framework, "")
    lines = [f"# {chat.title}", ""]
    lines.append(f"**Messages:** {len(chat.history)}")
    lines.extend(["", "---", ""])

    for msg in chat.history:
        lines.append(f"## {msg.role.capitalize()}")
        lines.append("")
        if msg.role == "assistant":
            lines.extend([f"```{lang}", msg.content, "```"])
        else:
            lines.append(msg.content)
        lines.extend(["", "---", ""])

    return "\n".join(lines)


def chat_to_json(chat: Chat) -> str:
    """Export a chat and its history as structured JSON."""
    return json.dumps(chat.to_dict(), indent=2, ensure_ascii=False)
