#!/usr/bin/env python3
"""
ABI extraction and dispatch synthesis for contract classes.

Runs as a pass over already-parsed host declarations: collects the ABI
annotations of every contract class, resolves their type spellings,
computes 4-byte call selectors, builds the ABI manifests, injects the
``execute`` routing method into each class and renders the TypeScript
ABI fragments consumed by client libraries.

Usage:
    python -m abi_transform.abigen declarations.json -o abis-output/

The input is a JSON declaration dump as described in ``host/loader.py``.
"""

import json
import sys
from pathlib import Path
from typing import Dict, List, Optional

from .errors import AbiTransformError
from .host import HostProgram, HostSource, load_sources_from_file
from .parser import ParameterDefinitionParser
from .type_system import TupleTypeResolver
from .codegen import (
    AbiFileGenerator,
    AbiManifestBuilder,
    ClassAbi,
    CodeGenerationContext,
    DefinitionGenerator,
    DispatchSynthesizer,
    MethodAbiAssembler,
    TransformDiagnostics,
)


MANIFEST_FILE_NAME = 'abi.json'
FRAGMENT_DIR_NAME = 'abis'


class AbiTransform:
    """Main transform class that orchestrates one compilation unit."""

    def __init__(
        self,
        output_dir: str = './abis-output',
        emit_typescript: bool = True,
        verbose: bool = False,
    ):
        self.output_dir = Path(output_dir)
        self.emit_typescript = emit_typescript
        self.diagnostics = TransformDiagnostics(verbose=verbose)
        self.ctx = CodeGenerationContext(_diagnostics=self.diagnostics)
        self.tuples = TupleTypeResolver()

        # Populated by transform()
        self.assembler: Optional[MethodAbiAssembler] = None
        self.unit_abi: Optional[ClassAbi] = None
        self.class_abis: Dict[str, ClassAbi] = {}
        self.dispatch_sources: Dict[str, str] = {}

    def transform(
        self,
        sources: List[HostSource],
        program: Optional[HostProgram] = None,
    ) -> Dict[str, str]:
        """Run the pass over a compilation unit.

        Args:
            sources: Host sources; standard library sources are skipped
            program: The host's resolved program. When omitted every
                collected declaration is taken to resolve.

        Returns:
            Output path -> file contents. Nothing is written to disk.

        Raises:
            DeclarationNotFoundError: if an annotated method is missing from
                the program
            UnresolvedTypeError: if a type spelling does not resolve
        """
        assembler = MethodAbiAssembler(ParameterDefinitionParser(self.tuples))
        assembler.visit_sources(sources)
        if program is None:
            program = HostProgram.from_sources(assembler.arena, sources)
        assembler.resolve_internal_names(program)
        assembler.check_unused_events(self.diagnostics)

        builder = AbiManifestBuilder(assembler, self.tuples)
        builder.assign_selectors()
        unit_abi = builder.build_abi()
        class_abis = builder.build_abi_per_class()

        synthesizer = DispatchSynthesizer(self.ctx, builder)
        self.dispatch_sources = synthesizer.inject_all(
            assembler.methods_by_class, assembler.class_declarations
        )
        self.assembler = assembler
        self.unit_abi = unit_abi
        self.class_abis = class_abis

        results = {
            str(self.output_dir / MANIFEST_FILE_NAME): self.manifest_json(unit_abi),
        }
        if self.emit_typescript:
            results.update(self.generate_fragments(class_abis))
        return results

    def transform_file(self, filepath: str) -> Dict[str, str]:
        """Load a JSON declaration dump and transform it."""
        return self.transform(load_sources_from_file(filepath))

    @staticmethod
    def manifest_json(abi: ClassAbi) -> str:
        return json.dumps(abi.to_dict(), indent=4) + '\n'

    def generate_fragments(self, class_abis: Dict[str, ClassAbi]) -> Dict[str, str]:
        """Render the ABI-constant and declaration fragments per class."""
        abi_generator = AbiFileGenerator(self.ctx)
        definition_generator = DefinitionGenerator(self.ctx)
        fragment_dir = self.output_dir / FRAGMENT_DIR_NAME

        results = {}
        for class_name, abi in class_abis.items():
            if not abi.functions:
                continue
            results[str(fragment_dir / f'{class_name}.abi.ts')] = abi_generator.generate(class_name, abi)
            results[str(fragment_dir / f'{class_name}.d.ts')] = definition_generator.generate(class_name, abi)
        return results

    def write_output(self, results: Dict[str, str]) -> None:
        """Write generated files to disk."""
        for filepath, content in results.items():
            path = Path(filepath)
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, 'w') as f:
                f.write(content)
            print(f"Written: {filepath}")


# =============================================================================
# CLI INTERFACE
# =============================================================================

def main(argv: Optional[List[str]] = None) -> int:
    import argparse

    parser = argparse.ArgumentParser(description='Contract ABI extraction and dispatch synthesis')
    parser.add_argument('input', help='JSON declaration dump')
    parser.add_argument('-o', '--output', default='./abis-output', help='Output directory')
    parser.add_argument('--stdout', action='store_true',
                        help='Print the manifest and routing methods instead of writing files')
    parser.add_argument('--no-typescript', action='store_true',
                        help='Skip the TypeScript ABI fragments')
    parser.add_argument('--verbose', action='store_true',
                        help='Print every diagnostic')

    args = parser.parse_args(argv)

    transform = AbiTransform(
        output_dir=args.output,
        emit_typescript=not args.no_typescript,
        verbose=args.verbose,
    )

    try:
        results = transform.transform_file(args.input)
    except AbiTransformError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.stdout:
        print(transform.manifest_json(transform.unit_abi), end='')
        for class_name, source in transform.dispatch_sources.items():
            print(f"\n// {class_name}")
            print(source)
    else:
        transform.write_output(results)

    transform.diagnostics.print_summary()
    return 0


if __name__ == '__main__':
    sys.exit(main())
