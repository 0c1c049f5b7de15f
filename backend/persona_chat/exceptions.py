"""
Exceptions raised by the session and chat services.
"""


class PersonaChatError(Exception):
    """Base class for service errors."""


class SessionFormatError(PersonaChatError):
    """Imported session data is unparseable or structurally invalid."""


class PersonaNotFoundError(PersonaChatError):
    """No built-in or custom persona has the requested id."""

    def __init__(self, persona_id: str):
        super().__init__(f"Persona not found: {persona_id}")
        self.persona_id = persona_id


class PersonaConflictError(PersonaChatError):
    """A custom persona would shadow an existing persona id."""


class ChatServiceError(PersonaChatError):
    """The chat-completion collaborator failed or returned nothing usable."""
