"""Tool plugin loader."""

import json
import importlib
import inspect
import logging
from pathlib import Path
from typing import Any, Callable, Type
from functools import wraps
from pydantic import BaseModel

logger = logging.getLogger(__name__)


class ToolManifest:
    """Handles manifest loading with sensible defaults."""

    DEFAULT_MANIFEST = {
        "name": "unnamed_tool",
        "description": "No description provided.",
        "tags": [],
    }

    def __init__(self, tool_dir: Path):
        self.manifest = self.DEFAULT_MANIFEST.copy()
        manifest_path = tool_dir / "manifest.json"

        if manifest_path.exists():
            try:
                with open(manifest_path, encoding="utf-8") as f:
                    file_manifest = json.load(f)
                self.manifest.update(file_manifest)
            except (PermissionError, json.JSONDecodeError) as e:
                logger.warning("Could not read manifest.json: %s", e)
        else:
            logger.warning("No manifest.json found at %s", manifest_path)

    def get(self, key: str, default=None):
        """Get a manifest value."""
        return self.manifest.get(key, default)

    @property
    def name(self) -> str:
        """Get the tool name from the manifest."""
        return self.manifest["name"]

    @property
    def description(self) -> str:
        """Get the tool description from the manifest."""
        return self.manifest["description"]

    @property
    def tags(self) -> list:
        """Get the tool tags from the manifest, returning empty list if not specified."""
        return self.manifest.get("tags", [])


def create_simple_tool(
    manifest_path: Path,
    func: Callable[..., Any],
    output_schema: dict | Type[BaseModel] | None = None,
) -> Callable:
    """
    Factory function for creating simple tools without a class.

    Args:
        manifest_path: Path to the tool's directory (containing manifest.json)
        func: The function implementing the tool logic
        output_schema: Optional output schema (dict or Pydantic model class) for the tool

    Returns:
        A register function compatible with the MCP loader

    Example:
        def check_period(query: TimePeriodValidationInput) -> dict:
            return {"valid": True}

        register = create_simple_tool(Path(__file__).parent, check_period)
    """
    manifest = ToolManifest(manifest_path)

    def register(mcp):
        @mcp.tool(
            name=manifest.name,
            description=manifest.description,
            output_schema=output_schema,
            tags=set(manifest.tags) if manifest.tags else None,
        )
        @wraps(func)
        async def wrapper(*args, **kwargs):
            return func(*args, **kwargs)

        # copy signature explicitly
        wrapper.__signature__ = inspect.signature(func)

        return wrapper

    return register


def find_output_model(module) -> Type[BaseModel] | None:
    """
    Find the output model of a tool's output_model module.

    Models named "...Output" win over helper models defined alongside them.
    """
    models = [
        attr
        for attr in vars(module).values()
        if inspect.isclass(attr)
        and issubclass(attr, BaseModel)
        and attr is not BaseModel
        and attr.__module__ == module.__name__
    ]
    for model in models:
        if model.__name__.endswith("Output"):
            return model
    return models[0] if models else None


def load_tools_from_directory(mcp, tools_dir="tools"):
    """Load all tools from the tools directory."""
    tools_dir = Path(tools_dir)
    loaded = []
    failed = []

    for tool_folder in sorted(tools_dir.iterdir()):
        if not tool_folder.is_dir() or tool_folder.name.startswith((".", "__")):
            continue

        manifest_path = tool_folder / "manifest.json"
        if not manifest_path.exists():
            logger.info("[SKIP] %s: No manifest.json", tool_folder.name)
            continue

        try:
            with open(manifest_path, encoding="utf-8") as f:
                manifest = json.load(f)

            tool_name = manifest.get("name")
            tool_entry = manifest.get("entry_function")
            if not tool_name:
                raise ValueError("manifest.json missing 'name' field")

            module_path = f"{tools_dir.name}.{tool_folder.name}.tool"
            module = importlib.import_module(module_path)

            if not tool_entry or not hasattr(module, tool_entry):
                raise AttributeError(f"tool.py missing function '{tool_entry}'")

            tool_func = getattr(module, tool_entry)

            # Prefer the Pydantic output model, fall back to output.json
            output_schema = None
            try:
                output_module = importlib.import_module(
                    f"{tools_dir.name}.{tool_folder.name}.output_model"
                )
                output_model = find_output_model(output_module)
                if output_model is not None:
                    output_schema = output_model.model_json_schema()
                    logger.info(
                        "Using Pydantic model %s for %s", output_model.__name__, tool_name
                    )
            except ImportError:
                schema_path = tool_folder / "output.json"
                if schema_path.exists():
                    with open(schema_path, encoding="utf-8") as f:
                        output_schema = json.load(f)
                    logger.info("Using JSON schema for %s", tool_name)

            register_func = create_simple_tool(tool_folder, tool_func, output_schema)
            register_func(mcp)

            loaded.append(tool_name)
            logger.info("[LOAD] %s", tool_name)

        except (ValueError, AttributeError, ImportError) as e:
            failed.append(tool_folder.name)
            logger.error("[FAIL] %s: %s", tool_folder.name, e)

    logger.info("Loaded: %d tools", len(loaded))
    if failed:
        logger.warning("Failed: %d tools: %s", len(failed), ", ".join(failed))

    return {"loaded": loaded, "failed": failed}
