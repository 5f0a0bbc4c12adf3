"""Extension layer: plugin system via pluggy.

Discovery: the ``todoctl.plugins`` entry-point group and ``.todoctl/plugins/*.py``.
INVARIANT: Plugin failures are warnings, never errors.
"""

from todoctl.plugins.event_bus import EventBus, InMemoryEventBus
from todoctl.plugins.manager import PluginManager

__all__ = ["EventBus", "InMemoryEventBus", "PluginManager"]
