"""
ABI-constant fragment generation.

Renders one class manifest as a TypeScript module exporting the class's
events and its ABI array, in the shape the client library consumes.
"""

from typing import List

from .base import BaseGenerator
from .manifest import AbiParameter, ClassAbi, EventEntry, FunctionEntry, VIEW_TYPE


OPNET_MODULE = 'opnet'
BASE_ABI_NAME = 'OP_NET_ABI'


class AbiFileGenerator(BaseGenerator):
    """
    Generates ``<Class>.abi.ts`` source from a class manifest.
    """

    def generate(self, class_name: str, abi: ClassAbi) -> str:
        self._ctx.reset_for_class()
        events_name = f'{class_name}Events'
        abi_name = f'{class_name}Abi'

        lines = [
            f"import {{ ABIDataTypes, BitcoinAbiTypes, {BASE_ABI_NAME} }} from '{OPNET_MODULE}';",
            '',
            f'export const {events_name} = [',
        ]
        self.indent_level += 1
        for event in abi.events:
            lines.extend(self._generate_event(event))
        self.indent_level -= 1
        lines.append('];')
        lines.append('')

        lines.append(f'export const {abi_name} = [')
        self.indent_level += 1
        for function in abi.functions:
            lines.extend(self._generate_function(function))
        lines.append(self.line(f'...{events_name},'))
        lines.append(self.line(f'...{BASE_ABI_NAME},'))
        self.indent_level -= 1
        lines.append('];')
        lines.append('')
        lines.append(f'export default {abi_name};')
        return self.join_lines(lines)

    def _generate_function(self, function: FunctionEntry) -> List[str]:
        lines = [self.line('{')]
        self.indent_level += 1
        lines.append(self.line(f'name: {self.quote(function.name)},'))
        if function.type == VIEW_TYPE:
            lines.append(self.line('constant: true,'))
        if function.payable:
            lines.append(self.line('payable: true,'))
        lines.extend(self._generate_params('inputs', function.inputs))
        lines.extend(self._generate_params('outputs', function.outputs))
        lines.append(self.line('type: BitcoinAbiTypes.Function,'))
        self.indent_level -= 1
        lines.append(self.line('},'))
        return lines

    def _generate_event(self, event: EventEntry) -> List[str]:
        lines = [self.line('{')]
        self.indent_level += 1
        lines.append(self.line(f'name: {self.quote(event.name)},'))
        lines.extend(self._generate_params('values', event.values))
        lines.append(self.line('type: BitcoinAbiTypes.Event,'))
        self.indent_level -= 1
        lines.append(self.line('},'))
        return lines

    def _generate_params(self, key: str, params: List[AbiParameter]) -> List[str]:
        if not params:
            return [self.line(f'{key}: [],')]
        lines = [self.line(f'{key}: [')]
        self.indent_level += 1
        for param in params:
            lines.append(self.line(
                f'{{ name: {self.quote(param.name)}, type: ABIDataTypes.{param.type.value} }},'
            ))
        self.indent_level -= 1
        lines.append(self.line('],'))
        return lines
