"""Core HR module — the employee directory: model, schemas and service."""

from hrportal.core_hr.models import Employee

__all__ = ["Employee"]
