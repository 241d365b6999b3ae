import logging
from typing import Any, Iterable, Tuple

from hookloader.core.module_state import ModuleSet
from hookloader.core.registry import HandlerRegistry

logger = logging.getLogger(__name__)


class RegistryBuilder:
    """
    Grabs the `middleware` mapping exposed by each active hook and files it
    under the hook's identity. Purely synchronous.
    """

    def build(self, module_set: ModuleSet) -> HandlerRegistry:
        logger.debug('Instantiating registry...')
        return self.aggregate(module_set.iter_active())

    @staticmethod
    def aggregate(hooks: Iterable[Tuple[str, Any]]) -> HandlerRegistry:
        """Later entries with the same identity replace earlier ones. Each namespace is the hook's own middleware mapping."""
        registry = HandlerRegistry()
        for identity, hook in hooks:
            middleware = getattr(hook, 'middleware', None)
            # By reference: deferred hooks may add handlers until mark_ready().
            registry.register(identity, middleware if middleware is not None else {})
        return registry
