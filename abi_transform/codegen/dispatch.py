"""
Dispatch routine synthesis.

Every contract class with ABI methods gets an ``execute`` override that
routes an incoming 4-byte selector to the matching method and otherwise
defers to the parent class::

    // auto-injected by transform
    public override execute(selector: u32, calldata: Calldata): BytesWriter {
        if (selector == 0x<selector of transfer(address,uint256)>) return this.transfer(calldata);
        return super.execute(selector, calldata);
    }

The routine replaces an existing ``execute`` member in place, or is appended
to the member list.
"""

from typing import Dict, List, TYPE_CHECKING

if TYPE_CHECKING:
    from .context import CodeGenerationContext
    from .manifest import AbiManifestBuilder

from ..host import ClassDeclaration, MethodDeclaration
from .base import BaseGenerator
from .collector import MethodRecord
from .selector import selector_literal


EXECUTE_METHOD_NAME = 'execute'
AUTO_INJECTED_MARKER = '// auto-injected by transform'


class DispatchSynthesizer(BaseGenerator):
    """
    Generates the selector routing procedure for contract classes.

    Synthesis depends only on the current records and the member list it is
    given. Running it again on the same snapshot yields the same member list.
    """

    def __init__(self, ctx: 'CodeGenerationContext', manifest_builder: 'AbiManifestBuilder'):
        """
        Initialize the dispatch synthesizer.

        Args:
            ctx: The code generation context
            manifest_builder: Resolves types and assigns selectors to records
        """
        super().__init__(ctx)
        self._manifest = manifest_builder

    def build_execute_method(self, class_name: str, records: List[MethodRecord]) -> str:
        """Render the ``execute`` member for a class.

        Guards follow record collection order. Records that share a selector
        each get a guard; whichever comes first in the body is the one that
        runs.
        """
        self._ctx.reset_for_class()
        lines = [
            self.line(AUTO_INJECTED_MARKER),
            self.line(
                f'public override {EXECUTE_METHOD_NAME}(selector: u32, calldata: Calldata): BytesWriter {{'
            ),
        ]
        self.indent_level += 1

        for record in records:
            selector = self._manifest.assign_selector(record)
            lines.append(self.line(
                f'if (selector == {selector_literal(selector)}) '
                f'return this.{record.declared_name}(calldata);'
            ))

        lines.append(self.line(f'return super.{EXECUTE_METHOD_NAME}(selector, calldata);'))
        self.indent_level -= 1
        lines.append(self.line('}'))
        return '\n'.join(lines)

    def synthesize_member(self, class_name: str, records: List[MethodRecord]) -> MethodDeclaration:
        return MethodDeclaration(
            name=EXECUTE_METHOD_NAME,
            source=self.build_execute_method(class_name, records),
            is_synthesized=True,
        )

    def inject(self, class_decl: ClassDeclaration, records: List[MethodRecord]) -> MethodDeclaration:
        """Splice a fresh ``execute`` into the class member list.

        Returns the injected member.
        """
        member = self.synthesize_member(class_decl.name, records)
        existing_index = class_decl.find_method_index(EXECUTE_METHOD_NAME)
        if existing_index != -1:
            self._ctx.diagnostics.info_execute_overwritten(class_decl.name)
            class_decl.members[existing_index] = member
        else:
            class_decl.members.append(member)
        return member

    def inject_all(
        self,
        methods_by_class: Dict[str, List[MethodRecord]],
        class_declarations: Dict[str, ClassDeclaration],
    ) -> Dict[str, str]:
        """Inject ``execute`` into every class with records.

        Returns the synthesized source text per class name.
        """
        injected: Dict[str, str] = {}
        for class_name, records in methods_by_class.items():
            if not records:
                continue
            class_decl = class_declarations.get(class_name)
            if class_decl is None:
                self._ctx.diagnostics.warn_class_not_found(class_name)
                continue
            injected[class_name] = self.inject(class_decl, records).source
        return injected
