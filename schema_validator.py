"""
Validate tool outputs against the JSON schemas under schemas/<tool>/output.json.

In CI the committed sample_output.json files are checked; locally each tool is
run on its sample_input.json. `python schema_validator.py generate` rewrites
the sample outputs.
"""

import os
import json
import inspect
import importlib
import logging
from pathlib import Path
from jsonschema import validate, ValidationError

logger = logging.getLogger(__name__)

BASE_DIR = Path(__file__).resolve().parent


def validate_tool_schemas(base_dir: Path = BASE_DIR) -> bool:
    """
    Validate tools using pre-generated sample outputs in CI,
    or by running tools locally.
    """
    schema_dir = base_dir / "schemas"
    is_ci = os.getenv("CI", "false").lower() == "true"

    all_valid = True

    for tool_folder in sorted(schema_dir.iterdir()):
        if not tool_folder.is_dir() or tool_folder.name.startswith(("_", ".")):
            continue

        tool_name = tool_folder.name
        output_schema_file = tool_folder / "output.json"
        sample_output_file = tool_folder / "sample_output.json"

        if not output_schema_file.exists():
            logger.warning("No output schema for %s", tool_name)
            continue

        with open(output_schema_file, encoding="utf-8") as f:
            output_schema = json.load(f)

        if is_ci:
            if not sample_output_file.exists():
                logger.error(
                    "%s: No sample_output.json (run 'python schema_validator.py generate')",
                    tool_name,
                )
                all_valid = False
                continue

            with open(sample_output_file, encoding="utf-8") as f:
                output = json.load(f)

            logger.info("Testing %s (using sample output)...", tool_name)

        else:
            input_file = tool_folder / "sample_input.json"
            if not input_file.exists():
                logger.warning("No sample_input.json for %s", tool_name)
                continue

            with open(input_file, encoding="utf-8") as f:
                input_data = json.load(f)

            logger.info("Testing %s (running tool)...", tool_name)

            try:
                output = run_tool(tool_name, input_data, base_dir)
            except (ImportError, AttributeError, ValueError) as e:
                logger.error("%s execution failed: %s", tool_name, e)
                all_valid = False
                continue

        try:
            validate(instance=output, schema=output_schema)
            logger.info("%s output is valid", tool_name)
        except ValidationError as e:
            logger.error("%s validation failed: %s", tool_name, e.message)
            logger.error("Output: %s", json.dumps(output, indent=2, default=str)[:500])
            all_valid = False

    return all_valid


def run_tool(tool_name: str, input_data: dict, base_dir: Path = BASE_DIR):
    """
    Run a tool's entry function with given input.

    The input is validated with the model the entry function is annotated with.
    """
    with open(base_dir / "tools" / tool_name / "manifest.json", encoding="utf-8") as f:
        manifest = json.load(f)

    module = importlib.import_module(f"tools.{tool_name}.tool")
    entry = manifest.get("entry_function")
    if not entry or not hasattr(module, entry):
        raise AttributeError(f"tool.py missing function '{entry}'")

    func = getattr(module, entry)
    parameter = next(iter(inspect.signature(func).parameters.values()))
    query = parameter.annotation.model_validate(input_data)

    return func(query)


def generate_sample_outputs(base_dir: Path = BASE_DIR) -> None:
    """Run every tool on its sample input and save the output as its sample output."""
    tools_dir = base_dir / "tools"
    schema_dir = base_dir / "schemas"

    for tool_folder in sorted(tools_dir.iterdir()):
        if not tool_folder.is_dir() or tool_folder.name.startswith(("_", ".")):
            continue

        tool_name = tool_folder.name
        schema_folder = schema_dir / tool_name
        input_file = schema_folder / "sample_input.json"
        sample_output_file = schema_folder / "sample_output.json"

        if not input_file.exists():
            logger.info("Skipping %s (no sample_input.json)", tool_name)
            continue

        with open(input_file, encoding="utf-8") as f:
            input_data = json.load(f)

        logger.info("Generating output for %s...", tool_name)
        output = run_tool(tool_name, input_data, base_dir)

        schema_folder.mkdir(exist_ok=True, parents=True)
        with open(sample_output_file, "w", encoding="utf-8") as f:
            json.dump(output, f, indent=2, default=str)
            f.write("\n")

        logger.info("Saved to %s", sample_output_file.relative_to(base_dir))


if __name__ == "__main__":
    import sys

    logging.basicConfig(level=logging.INFO, format="%(message)s")

    if len(sys.argv) > 1 and sys.argv[1] == "generate":
        generate_sample_outputs()
    else:
        success = validate_tool_schemas()
        sys.exit(0 if success else 1)
