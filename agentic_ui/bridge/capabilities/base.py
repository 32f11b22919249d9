from __future__ import annotations

"""Capability data models.

A capability is something a mounted UI component exposes to the agent:

- an *action*: a named, schema-described operation the agent may invoke to
  mutate component state (``ActionDescriptor``),
- a *readable*: a described snapshot of component state published into the
  agent's context window (``ReadableEntry``).

Actions follow a fixed contract (``name``, parameter schema, ``invoke``) so the
dispatch executor never needs reflection to find a handler: it looks the
descriptor up by name and calls ``invoke``.
"""

import inspect
import json
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List, Literal, Optional, Sequence, Tuple, Type, Union

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, StrictFloat, StrictInt, create_model, model_validator
from pydantic_core import to_jsonable_python

ActionHandler = Callable[[Dict[str, Any]], Union[Any, Awaitable[Any]]]


class CapabilityKind(str, Enum):
    """The two capability namespaces held by a registry."""

    ACTION = "action"
    READABLE = "readable"

    def __str__(self) -> str:
        return self.value


class ParameterType(str, Enum):
    """Parameter types an action may declare."""

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    STRING_ARRAY = "string[]"
    NUMBER_ARRAY = "number[]"
    OBJECT_ARRAY = "object[]"
    ENUM = "enum"

    def __str__(self) -> str:
        return self.value


_JSON_SCHEMA_TYPES: Dict[ParameterType, Dict[str, Any]] = {
    ParameterType.STRING: {"type": "string"},
    ParameterType.NUMBER: {"type": "number"},
    ParameterType.BOOLEAN: {"type": "boolean"},
    ParameterType.STRING_ARRAY: {"type": "array", "items": {"type": "string"}},
    ParameterType.NUMBER_ARRAY: {"type": "array", "items": {"type": "number"}},
    ParameterType.OBJECT_ARRAY: {"type": "array", "items": {"type": "object"}},
    ParameterType.ENUM: {"type": "string"},
}

_PYTHON_TYPES: Dict[ParameterType, Any] = {
    ParameterType.STRING: str,
    ParameterType.NUMBER: Union[StrictInt, StrictFloat],
    ParameterType.BOOLEAN: bool,
    ParameterType.STRING_ARRAY: List[str],
    ParameterType.NUMBER_ARRAY: List[Union[StrictInt, StrictFloat]],
    ParameterType.OBJECT_ARRAY: List[Dict[str, Any]],
}


class ParameterSpec(BaseModel):
    """Declaration of a single action parameter.

    Attributes:
        name: Parameter name as the agent sees it
        type: Declared parameter type
        required: Whether the parameter must be present at invocation time
        description: Human/agent readable description
        enum: Allowed values; mandatory for ``enum`` parameters and also
            accepted on ``string`` parameters to restrict them
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, description="Parameter name")
    type: ParameterType = Field(default=ParameterType.STRING, description="Declared parameter type")
    required: bool = Field(default=True, description="Whether the parameter is required")
    description: str = Field(default="", description="Parameter description")
    enum: Optional[Tuple[str, ...]] = Field(default=None, description="Allowed values for enum parameters")

    @model_validator(mode="after")
    def _check_enum(self) -> "ParameterSpec":
        if self.type == ParameterType.ENUM and not self.enum:
            raise ValueError(f"Enum parameter '{self.name}' must declare at least one allowed value")
        if self.enum and self.type not in (ParameterType.ENUM, ParameterType.STRING):
            raise ValueError(f"Parameter '{self.name}' of type {self.type} cannot declare enum values")
        return self

    def python_type(self) -> Any:
        """Return the python annotation used to validate values of this parameter."""
        if self.enum:
            return Literal[self.enum]
        return _PYTHON_TYPES[self.type]

    def to_json_schema(self) -> Dict[str, Any]:
        """Translate the parameter into a JSON schema property."""
        schema = dict(_JSON_SCHEMA_TYPES[self.type])
        if self.description:
            schema["description"] = self.description
        if self.enum:
            schema["enum"] = list(self.enum)
        return schema


class ActionDescriptor(BaseModel):
    """A named action a component exposes to the agent.

    ``handler`` receives a mapping of parameter name to validated value and
    returns the result text for the agent. It may be a plain function or a
    coroutine function.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    name: str = Field(..., min_length=1, description="Unique action name within a registry")
    description: str = Field(default="", description="What the action does, for the agent")
    parameters: List[ParameterSpec] = Field(default_factory=list, description="Ordered parameter declarations")
    handler: ActionHandler = Field(..., description="Callable invoked with the validated parameter mapping")

    _input_model: Optional[Type[BaseModel]] = PrivateAttr(default=None)

    @model_validator(mode="after")
    def _check_unique_parameters(self) -> "ActionDescriptor":
        names = [p.name for p in self.parameters]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise ValueError(f"Action '{self.name}' declares duplicate parameters: {', '.join(duplicates)}")
        return self

    def required_parameters(self) -> List[str]:
        return [p.name for p in self.parameters if p.required]

    def input_model(self) -> Type[BaseModel]:
        """Build (once) the pydantic model validating this action's parameters.

        Fields are keyed by position and aliased to the declared names so that
        parameter names never clash with ``BaseModel`` attributes.
        """
        if self._input_model is None:
            fields: Dict[str, Any] = {}
            for index, spec in enumerate(self.parameters):
                annotation = spec.python_type()
                if spec.required:
                    fields[f"p{index}"] = (annotation, Field(..., alias=spec.name))
                else:
                    fields[f"p{index}"] = (Optional[annotation], Field(default=None, alias=spec.name))
            self._input_model = create_model(
                f"{self.name}Parameters",
                __config__=ConfigDict(extra="ignore"),
                **fields,
            )
        return self._input_model

    def to_tool_schema(self) -> Dict[str, Any]:
        """Translate the descriptor into a backend tool/function definition."""
        return build_tool_schema(self.name, self.description, self.parameters)

    async def invoke(self, parameters: Dict[str, Any]) -> str:
        """Run the handler once and coerce its result to text."""
        result = self.handler(parameters)
        if inspect.isawaitable(result):
            result = await result
        return coerce_result_text(result)


class ReadableEntry(BaseModel):
    """A described snapshot of component state published for the agent."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    description: str = Field(..., description="What the value represents")
    value: Any = Field(default=None, description="Serializable state snapshot")
    owner_id: Optional[str] = Field(default=None, description="Lifecycle token of the owning component")


def build_tool_schema(name: str, description: str, parameters: Sequence[ParameterSpec]) -> Dict[str, Any]:
    """Build a JSON-schema tool definition from ordered parameter specs."""
    return {
        "name": name,
        "description": description,
        "parameters": {
            "type": "object",
            "properties": {p.name: p.to_json_schema() for p in parameters},
            "required": [p.name for p in parameters if p.required],
        },
    }


def coerce_result_text(result: Any) -> str:
    """Coerce a handler result into the string handed back to the agent."""
    if result is None:
        return ""
    if isinstance(result, str):
        return result
    return json.dumps(to_jsonable_python(result, fallback=str))
