from .bilou import BILOU, EntityGroup, Prefix, decode_entity_groups, filter_entities
from .device import select_device

__all__ = [
    "BILOU",
    "EntityGroup",
    "Prefix",
    "decode_entity_groups",
    "filter_entities",
    "select_device",
]
