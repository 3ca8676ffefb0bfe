'''
.------..------..------..------.
|d.--. ||g.--. ||e.--. ||n.--. |
| :/\: || :/\: || (\/) || :(): |
| (__) || :\/: || :\/: || ()() |
| '--'d|| '--'g|| '--'e|| '--'n|
`------'`------'`------'`------'
schema-driven record generator for the collex test suites.
'''

import numpy as np
from faker import Faker
from collex import from_iterable, Enumerable
from typing import Any, Callable, Dict, List, Optional


class Generator:
    """schema interpreter.

    a schema is a dict of field -> spec, where spec is one of:
      - a faker method name ('word', 'name', 'date_this_decade')
      - a (method name, kwargs) tuple
      - a provider dict with a '_qen_provider' key
      - a nested schema dict
      - anything else, used as a literal
    """

    def __init__(self, seed: Optional[int] = None):
        self._fake = Faker()
        if seed is not None:
            self._fake.seed_instance(seed)
        self._rng = np.random.default_rng(seed)
        self._counters: Dict[str, int] = {}

    def _resolve_faker_method(self, method_name: str, kwargs: Optional[Dict] = None) -> Any:
        try:
            method = getattr(self._fake, method_name)
        except AttributeError:
            raise ValueError(f"faker has no provider '{method_name}'")
        return method(**(kwargs or {}))

    def _resolve_provider(self, config: Dict, context: Dict) -> Any:
        provider = config["_qen_provider"]
        if provider == "ref":
            key = config["key"]
            if key not in context:
                raise ValueError(f"reference to '{key}' not found in current context.")
            return context[key]

        elif provider == "choice":
            # numpy hands back numpy scalars, tests compare against python values
            index = self._rng.integers(0, len(config["from"]))
            return config["from"][index]

        elif provider == "sequence":
            # unique, increasing values: handy when a sort must not see ties
            name = config.get("name", "default")
            self._counters[name] = self._counters.get(name, config.get("start", 1) - 1) + 1
            return self._counters[name]

        elif provider == "nullable":
            if self._rng.random() < config.get("p_none", 0.3):
                return None
            return self.create(config["of"], context)

        elif provider == "literal":
            if "value" not in config:
                raise ValueError("_qen_provider 'literal' requires a 'value' key.")
            return config["value"]

        else:
            raise ValueError(f"unknown _qen_provider: '{provider}'")

    def create(self, schema: Any, context: Optional[Dict] = None) -> Any:
        current_context = context or {}

        if isinstance(schema, dict):
            if "_qen_provider" in schema:
                return self._resolve_provider(schema, current_context)

            # build the object field by field so refs can see earlier siblings
            generated_obj = {}
            for k, v in schema.items():
                generated_obj[k] = self.create(v, {**current_context, **generated_obj})
            return generated_obj

        if isinstance(schema, str):
            if hasattr(self._fake, schema):
                return self._resolve_faker_method(schema)
            return schema

        if isinstance(schema, tuple) and len(schema) == 2 and isinstance(schema[1], dict):
            return self._resolve_faker_method(schema[0], schema[1])

        return schema


class _SchemaProvider:
    def __init__(self, schema: Any, seed: Optional[int] = None):
        self._schema = schema
        self._generator = Generator(seed)

    def take(self, count: int) -> Enumerable:
        """`count` generated dict records"""
        return from_iterable([self._generator.create(self._schema) for _ in range(count)])

    def records(self, count: int, factory: Callable[..., Any]) -> List[Any]:
        """`count` generated records passed as keyword arguments to factory (e.g. a dataclass)"""
        return [factory(**self._generator.create(self._schema)) for _ in range(count)]


def from_schema(schema: Any, seed: Optional[int] = None) -> _SchemaProvider:
    return _SchemaProvider(schema, seed)
