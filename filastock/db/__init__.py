from .brand import Brand
from .color import ColorEntry
from .inventory.unit import InventoryUnit
from .inventory.usage import UsageEvent
from .material_type import MaterialType

__all__ = ["Brand", "ColorEntry", "InventoryUnit", "MaterialType", "UsageEvent"]
