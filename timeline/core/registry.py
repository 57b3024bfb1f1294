"""
Mutation registry: the capability table of named mutations.

Each entry is a two-stage function. The outer stage (the factory) receives the
caller's arguments; the inner stage (the draft mutator) receives a mutable
working copy of the state and changes it in place:

    def update_name(name):
        def mutate(draft):
            draft["name"] = name
        return mutate
"""

from typing import Any, Callable, Dict, Iterator, Mapping, Optional, Tuple

from .errors import MutationFactoryError, UnknownMutation

# Draft mutator signature: (working_copy) -> None
DraftMutator = Callable[[Any], None]

# Factory signature: (*args) -> DraftMutator
MutationFactory = Callable[..., DraftMutator]


class MutationRegistry(Mapping[str, MutationFactory]):
    """
    Registry of mutation factories keyed by name.

    Usage:
        registry = MutationRegistry({"updateName": update_name})
        registry.register("toggleAgree", toggle_agree)
        mutator = registry.mutator("updateName", ("Ann",))

    The store treats a registry as read-only once it has been handed over.
    """

    def __init__(self, factories: Optional[Mapping[str, MutationFactory]] = None) -> None:
        self._factories: Dict[str, MutationFactory] = {}
        for name, factory in (factories or {}).items():
            self.register(name, factory)

    @classmethod
    def coerce(cls, mutations: Mapping[str, MutationFactory]) -> "MutationRegistry":
        """Return mutations unchanged if already a registry, else wrap a plain mapping."""
        if isinstance(mutations, cls):
            return mutations
        return cls(mutations)

    def register(self, name: str, factory: MutationFactory) -> None:
        """
        Register a mutation factory.

        Args:
            name: Unique mutation name
            factory: Callable (*args) -> draft mutator

        Raises:
            ValueError: If name is empty or already registered
            TypeError: If factory is not callable
        """
        if not isinstance(name, str) or not name:
            raise ValueError(f"mutation name must be a non-empty string, got {name!r}")
        if name in self._factories:
            raise ValueError(f"mutation already registered: {name}")
        if not callable(factory):
            raise TypeError(f"mutation factory for {name!r} is not callable")
        self._factories[name] = factory

    def __getitem__(self, name: str) -> MutationFactory:
        try:
            return self._factories[name]
        except KeyError:
            raise UnknownMutation(name) from None

    def __contains__(self, name: object) -> bool:
        return name in self._factories

    def get(self, name: str, default: Optional[MutationFactory] = None) -> Optional[MutationFactory]:
        return self._factories.get(name, default)

    def __iter__(self) -> Iterator[str]:
        return iter(self._factories)

    def __len__(self) -> int:
        return len(self._factories)

    def names(self) -> Tuple[str, ...]:
        return tuple(sorted(self._factories))

    def mutator(self, name: str, args: Tuple[Any, ...]) -> DraftMutator:
        """
        Build the draft mutator for one invocation.

        Raises:
            UnknownMutation: If name is not registered
            MutationFactoryError: If the factory rejects the arguments
                or does not return a callable
        """
        factory = self[name]
        try:
            mutator = factory(*args)
        except MutationFactoryError:
            raise
        except Exception as ex:
            raise MutationFactoryError(name, args, str(ex) or type(ex).__name__) from ex
        if not callable(mutator):
            raise MutationFactoryError(
                name, args, f"factory returned {type(mutator).__name__}, expected a draft mutator"
            )
        return mutator
