"""
Declaration fragment generation.

Renders a class manifest as a declaration-only TypeScript module: one
payload type per event, one ``CallResult`` alias per function, and an
``I<Class>`` interface with a typed signature per callable method.
"""

from typing import List, Set

from ..type_system import ts_imports_for
from .base import BaseGenerator
from .manifest import AbiParameter, ClassAbi, EventEntry, FunctionEntry


TRANSACTION_MODULE = '@btc-vision/transaction'
OPNET_MODULE = 'opnet'
SECTION_RULE = '// ------------------------------------------------------------------'


class DefinitionGenerator(BaseGenerator):
    """
    Generates ``<Class>.d.ts`` source from a class manifest.

    Type hints come from the manifest parameters; names that live in the
    transaction library are imported as they are used.
    """

    def generate(self, class_name: str, abi: ClassAbi) -> str:
        self._ctx.reset_for_class()
        self._ctx.opnet_imports.update({'CallResult', 'OPNetEvent', 'IOP_NETContract'})
        declared_events = {event.name for event in abi.events}

        body: List[str] = []
        body.extend(self._section('Event Definitions'))
        for event in abi.events:
            body.extend(self.generate_event_type(event))
            body.append('')

        body.extend(self._section('Call Results'))
        for function in abi.functions:
            body.extend(self.generate_call_result(function, declared_events))
            body.append('')

        body.extend(self._section(f'I{class_name}'))
        body.extend(self.generate_interface(class_name, abi.functions))

        return self.join_lines(self._imports() + [''] + body)

    # =========================================================================
    # SECTIONS
    # =========================================================================

    def generate_event_type(self, event: EventEntry) -> List[str]:
        lines = [f'export type {event.name}Event = {{']
        self.indent_level += 1
        for value in event.values:
            lines.append(self.line(f'readonly {value.name}: {self._hint(value)};'))
        self.indent_level -= 1
        lines.append('};')
        return lines

    def generate_call_result(self, function: FunctionEntry, declared_events: Set[str]) -> List[str]:
        lines = [
            '/**',
            f' * @description Represents the result of the {function.name} function call.',
            ' */',
            f'export type {self.pascal_case(function.name)} = CallResult<',
        ]
        self.indent_level += 1
        if function.outputs:
            lines.append(self.line('{'))
            self.indent_level += 1
            for output in function.outputs:
                lines.append(self.line(f'{output.name}: {self._hint(output)};'))
            self.indent_level -= 1
            lines.append(self.line('},'))
        else:
            lines.append(self.line('{},'))

        events = [e for e in function.emitted_events if e in declared_events]
        if events:
            event_types = ' | '.join(f'{e}Event' for e in events)
            lines.append(self.line(f'OPNetEvent<{event_types}>[]'))
        else:
            lines.append(self.line('OPNetEvent<never>[]'))
        self.indent_level -= 1
        lines.append('>;')
        return lines

    def generate_interface(self, class_name: str, functions: List[FunctionEntry]) -> List[str]:
        lines = [f'export interface I{class_name} extends IOP_NETContract {{']
        self.indent_level += 1
        for function in functions:
            params = ', '.join(f'{p.name}: {self._hint(p)}' for p in function.inputs)
            result_type = self.pascal_case(function.name)
            lines.append(self.line(f'{function.name}({params}): Promise<{result_type}>;'))
        self.indent_level -= 1
        lines.append('}')
        return lines

    # =========================================================================
    # HELPERS
    # =========================================================================

    def _hint(self, param: AbiParameter) -> str:
        self._ctx.transaction_imports.update(ts_imports_for(param.type_hint))
        return param.type_hint

    def _imports(self) -> List[str]:
        lines = []
        if self._ctx.transaction_imports:
            names = ', '.join(sorted(self._ctx.transaction_imports))
            lines.append(f"import {{ {names} }} from '{TRANSACTION_MODULE}';")
        names = ', '.join(sorted(self._ctx.opnet_imports))
        lines.append(f"import {{ {names} }} from '{OPNET_MODULE}';")
        return lines

    @staticmethod
    def _section(title: str) -> List[str]:
        return [SECTION_RULE, f'// {title}', SECTION_RULE]
