"""
Inventory units (one spool each).

Models:
- InventoryUnit (weight accounting + lifecycle status)
- UsageEvent (append-only weight deductions against a unit)
"""
