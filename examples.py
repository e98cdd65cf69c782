"""Showcase examples for archplot."""

from archplot import ArchitectureGenerator, demo_data, export_svg


def example_demo_landscape():
    """Two regions, an external system and a self-loop."""
    result = ArchitectureGenerator().generate(demo_data())
    export_svg(result.svg, "docs/demo_landscape.svg")


def example_fan_in():
    """Several systems feeding one target: parallel edges get their own slots."""
    data = {
        "AS": [
            {"id": "web", "name": "Web Shop", "platform": "Channels", "region": "Sales"},
            {"id": "app", "name": "Mobile App", "platform": "Channels", "region": "Sales"},
            {"id": "pos", "name": "Point of Sale", "platform": "Channels", "region": "Sales"},
            {"id": "hub", "name": "Order Hub", "platform": "Core", "region": "Operations",
             "role": ["product_fabric"]},
        ],
        "Link": [
            {"source": {"AS": "Web Shop"}, "target": {"AS": "Order Hub"}, "description": "Online orders"},
            {"source": {"AS": "Mobile App"}, "target": {"AS": "Order Hub"}, "description": "App orders"},
            {"source": {"AS": "Point of Sale"}, "target": {"AS": "Order Hub"}, "description": "Store orders"},
        ],
    }
    result = ArchitectureGenerator().generate(data)
    export_svg(result.svg, "docs/fan_in.svg")


def example_stacked_platform():
    """Systems stacked in one platform, with a connection jumping over a neighbour."""
    data = {
        "AS": [
            {"id": "a", "name": "Intake", "platform": "Pipeline", "region": "Data"},
            {"id": "b", "name": "Enrichment", "platform": "Pipeline", "region": "Data"},
            {"id": "c", "name": "Reporting", "platform": "Pipeline", "region": "Data"},
        ],
        "Function": [
            {"id": "f1", "name": "Validate records", "AS": "Intake"},
            {"id": "f2", "name": "Join reference data", "AS": "Enrichment"},
        ],
        "Link": [
            {"source": {"AS": "Intake"}, "target": {"AS": "Enrichment"}},
            {"source": {"AS": "Intake"}, "target": {"AS": "Reporting"}, "description": "Raw counts"},
        ],
    }
    result = ArchitectureGenerator().generate(data)
    export_svg(result.svg, "docs/stacked_platform.svg")


if __name__ == "__main__":
    import os

    os.makedirs("docs", exist_ok=True)

    print("Generating demo landscape...")
    example_demo_landscape()

    print("Generating fan-in example...")
    example_fan_in()

    print("Generating stacked platform example...")
    example_stacked_platform()

    print("\nAll examples generated in docs/")
