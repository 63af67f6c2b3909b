"""Interface for event id generators."""

import abc

# pylint: disable=too-few-public-methods


class IdGenerator(abc.ABC):
    """Contract for generating ids of newly created events."""

    @abc.abstractmethod
    def new_id(self) -> str:
        """Generate a new unique event identifier."""
