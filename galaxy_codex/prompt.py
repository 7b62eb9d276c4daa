from typing import List

from galaxy_codex.llms.schemas import LLMMessage

PROMPT_TEMPLATE = """Write an educational article about the topic below for a student exploring a knowledge graph.

Topic: {topic}

Start with a short introduction, then explain the key ideas in a few sections. Reference related topics the student should learn next as [[Topic Name]].

Article: """


def get_prompt(topic: str) -> str:
    return PROMPT_TEMPLATE.format(topic=topic)


def get_messages(*, topic: str, system_message: str) -> List[LLMMessage]:
    return [
        LLMMessage(role="system", content=system_message),
        LLMMessage(role="user", content=get_prompt(topic)),
    ]
