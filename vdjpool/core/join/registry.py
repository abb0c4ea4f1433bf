"""Key registry for equivalence-key discovery by identifier.

Provides decorator-based registration of ClonotypeKey variants so that
configuration files can select a key by name.
"""

from typing import Dict, List, Type, Union, TYPE_CHECKING

if TYPE_CHECKING:
    from .keys import ClonotypeKey


class KeyRegistry:
    """Registry for clonotype equivalence keys.

    Provides:
    - Decorator-based registration: @KeyRegistry.register
    - Key lookup by identifier
    - Resolution of either a key class or its identifier
    """

    _keys: Dict[str, Type["ClonotypeKey"]] = {}

    @classmethod
    def register(cls, key_class: Type["ClonotypeKey"]) -> Type["ClonotypeKey"]:
        """Register a key class.

        Use as decorator:
            @KeyRegistry.register
            class CustomKey(ClonotypeKey):
                key_id = "custom"
                fields = ("cdr3aa", "v")

        Parameters
        ----------
        key_class : Type[ClonotypeKey]
            Key class to register

        Returns
        -------
        Type[ClonotypeKey]
            The registered class (unchanged)
        """
        cls._keys[key_class.key_id] = key_class
        return key_class

    @classmethod
    def get_key(cls, key_id: str) -> Type["ClonotypeKey"]:
        """Get key class by identifier.

        Raises
        ------
        KeyError
            If no key is registered under ``key_id``
        """
        if key_id not in cls._keys:
            raise KeyError(
                f"Unknown clonotype key '{key_id}'. "
                f"Available: {', '.join(cls.list_key_ids())}"
            )
        return cls._keys[key_id]

    @classmethod
    def list_key_ids(cls) -> List[str]:
        """Get sorted list of registered key identifiers."""
        return sorted(cls._keys.keys())

    @classmethod
    def resolve(
        cls, key: Union[str, Type["ClonotypeKey"]]
    ) -> Type["ClonotypeKey"]:
        """Return the key class for a class or an identifier."""
        if isinstance(key, str):
            return cls.get_key(key)
        return key

    @classmethod
    def unregister(cls, key_id: str) -> None:
        """Remove a key from the registry (for testing)."""
        cls._keys.pop(key_id, None)
