"""
Contract identifier resolution.
"""
from .resolver import PLACEHOLDER_CONID, ContractResolver, StaticContractResolver

__all__ = ["ContractResolver", "StaticContractResolver", "PLACEHOLDER_CONID"]
