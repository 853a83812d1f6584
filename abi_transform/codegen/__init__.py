"""
Code generation module for the ABI transform.

This module collects annotation records, builds ABI manifests and selectors,
synthesizes dispatch routines and renders the generated TypeScript fragments.
"""

from .selector import (
    SelectorEncoder,
    encode_selector,
    selector_literal,
    SELECTOR_HASH_ALGORITHM,
    SELECTOR_BYTE_LENGTH,
)
from .collector import MethodAbiAssembler, MethodRecord, EventRecord, EventField
from .manifest import (
    AbiManifestBuilder,
    AbiParameter,
    FunctionEntry,
    EventEntry,
    ClassAbi,
    FUNCTION_TYPE,
    VIEW_TYPE,
    EVENT_TYPE,
)
from .context import CodeGenerationContext
from .base import BaseGenerator
from .dispatch import DispatchSynthesizer, EXECUTE_METHOD_NAME, AUTO_INJECTED_MARKER
from .abi_file import AbiFileGenerator
from .definition import DefinitionGenerator
from .diagnostics import TransformDiagnostics, Diagnostic, DiagnosticSeverity

__all__ = [
    'SelectorEncoder',
    'encode_selector',
    'selector_literal',
    'SELECTOR_HASH_ALGORITHM',
    'SELECTOR_BYTE_LENGTH',
    'MethodAbiAssembler',
    'MethodRecord',
    'EventRecord',
    'EventField',
    'AbiManifestBuilder',
    'AbiParameter',
    'FunctionEntry',
    'EventEntry',
    'ClassAbi',
    'FUNCTION_TYPE',
    'VIEW_TYPE',
    'EVENT_TYPE',
    'CodeGenerationContext',
    'BaseGenerator',
    'DispatchSynthesizer',
    'EXECUTE_METHOD_NAME',
    'AUTO_INJECTED_MARKER',
    'AbiFileGenerator',
    'DefinitionGenerator',
    'TransformDiagnostics',
    'Diagnostic',
    'DiagnosticSeverity',
]
