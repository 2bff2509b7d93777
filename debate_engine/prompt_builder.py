"""Chat prompt construction for debating models."""

from collections.abc import Mapping, Sequence

from .models import DebateMessage
from .types import Stance


class PromptBuilder:
    """Turns the debate history into OpenAI-style chat messages for one participant."""

    def __init__(self, display_names: Mapping[str, str] | None = None, sentence_limit: int = 4):
        self.display_names = dict(display_names or {})
        self.sentence_limit = sentence_limit

    def display_name(self, participant: str) -> str:
        return self.display_names.get(participant, participant.title())

    def system_prompt(self, participant: str, stance: Stance, topic: str) -> str:
        name = self.display_name(participant)
        return (
            f'You are {name}, an AI debating the topic: "{topic}". '
            f"You are arguing to {stance.value} the topic. "
            "Stick to your side throughout the debate. "
            f"Limit your answer to {self.sentence_limit} sentences with clear, "
            "data-driven, or example-based logic."
        )

    def turn_instruction(self, topic: str, history: Sequence[DebateMessage]) -> str:
        if not history:
            return f'Start a debate on the topic: "{topic}". Present your opening arguments.'
        return "Provide your next argument or counter-argument in this debate."

    def build_messages(
        self,
        participant: str,
        stance: Stance,
        topic: str,
        history: Sequence[DebateMessage],
    ) -> list[dict[str, str]]:
        """Build the full message list for the participant's next turn."""
        messages = [
            {"role": "system", "content": self.system_prompt(participant, stance, topic)}
        ]

        for msg in history:
            if msg.participant == participant:
                messages.append({"role": "assistant", "content": msg.content})
            else:
                messages.append(
                    {
                        "role": "user",
                        "content": f"{self.display_name(msg.participant)}: {msg.content}",
                    }
                )

        messages.append({"role": "user", "content": self.turn_instruction(topic, history)})
        return messages
