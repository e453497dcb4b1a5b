"""
Models for a loaded compose document.
"""
from typing import Dict, Optional
from pydantic import BaseModel
from .container_spec import ContainerSpec

class ComposeConfig(BaseModel):
    """
    All containers declared by one compose document, grouped under its namespace.
    """
    namespace: Optional[str] = None
    containers: Dict[str, ContainerSpec] = {}
