"""
Models Package

- gateway_schema: Best-effort output shapes requested from the inference gateway
- output_schema: RunOutput returned by a pipeline run
"""

from src.models.output_schema import RunOutput

__all__ = ["RunOutput"]
