"""Naming conventions shared by the data model and the inference passes."""
from __future__ import annotations


def camel_case(name: str) -> str:
    """Lower-case the first character, keep the rest"""
    if not name:
        return ""
    return name[0].lower() + name[1:]


def default_relation_name(model_a: str, model_b: str) -> str:
    """Implicit relation name between two models, independent of direction"""
    if model_a < model_b:
        return f"{model_a}To{model_b}"
    return f"{model_b}To{model_a}"
