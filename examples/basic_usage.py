#!/usr/bin/env python3
"""
Basic Usage Example for the SQL Introspection Engine

This example demonstrates:
1. Loading a schema snapshot from YAML
2. Introspecting it into a data model
3. Inspecting relations, warnings and metrics
"""
import json
import sys
import os

# Add src to path for local development
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from introspection_engine import (
    IntrospectionError,
    SnapshotDescriber,
    create_engine,
    format_error,
    get_metrics_collector,
)


def main():
    print("=" * 60)
    print("SQL Introspection Engine - Basic Usage Example")
    print("=" * 60)

    # Create engine; handlers come from LOG_LEVEL / LOG_JSON / LOG_FILE
    print("\n1. Creating engine...")
    engine = create_engine(database_type="postgresql", configure_logging=True)

    snapshot = os.path.join(os.path.dirname(__file__), "blog_schema.yaml")
    print(f"2. Introspecting {snapshot}...")

    try:
        result = engine.introspect(SnapshotDescriber(snapshot))
    except IntrospectionError as e:
        print(format_error(e))
        sys.exit(1)

    print(f"   Run ID: {result.run_id}")
    print(f"   Duration: {result.duration_ms}ms")

    print("\n3. Models:")
    print("-" * 60)
    for model in result.datamodel.models:
        marker = "// " if model.is_commented_out else ""
        print(f"{marker}model {model.name}")
        for field in model.fields:
            suffix = {"optional": "?", "list": "[]"}.get(field.arity.value, "")
            relation = ""
            if field.relation_info is not None:
                relation = f'  @relation("{field.relation_info.name}")'
            marker = "// " if field.is_commented_out else ""
            print(f"    {marker}{field.name:32s} {field.type_name}{suffix}{relation}")

    if result.warnings:
        print("\n4. Warnings:")
        for warning in result.warnings:
            print(f"   [{warning.code}] {warning.message}")
            for affected in warning.affected:
                print(f"       {affected}")

    print("\n5. Metrics:")
    print(json.dumps(get_metrics_collector().get_metrics(), indent=2))

    output = os.path.join(os.path.dirname(__file__), "blog_datamodel.yaml")
    result.datamodel.save(output)
    print(f"\nData model written to {output}")


if __name__ == "__main__":
    main()
