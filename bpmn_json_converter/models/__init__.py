"""
Process graph models.
"""

from .bpmn_elements import BpmnModel, GraphicInfo, Lane, Pool, Process
from .serialization import dump_model, load_model

__all__ = [
    "BpmnModel",
    "GraphicInfo",
    "Lane",
    "Pool",
    "Process",
    "dump_model",
    "load_model",
]
