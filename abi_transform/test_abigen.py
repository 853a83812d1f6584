#!/usr/bin/env python3
"""
Unit tests for the ABI transform.

Run with: python3 -m pytest abi_transform/test_abigen.py
   or: cd .. && python3 abi_transform/test_abigen.py
"""

import sys
import os
# Add parent directory to path so the package imports when run as a script
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import hashlib
import io
import json
import re
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout

from abi_transform.abigen import AbiTransform, main
from abi_transform.errors import (
    AbiTransformError,
    DeclarationNotFoundError,
    HostInputError,
    UnresolvedTypeError,
)
from abi_transform.host import (
    ClassDeclaration,
    DeclarationArena,
    Decorator,
    FieldDeclaration,
    HostProgram,
    HostSource,
    MethodDeclaration,
    load_sources,
    load_sources_from_file,
    unquote,
)
from abi_transform.parser import (
    LiteralParseFailure,
    NamedParameter,
    NameOverride,
    ParameterDefinitionParser,
    ParameterList,
    try_parse_named_parameter,
)
from abi_transform.type_system import (
    ABI_TYPE_TO_STR,
    STR_TO_ABI_TYPE,
    AbiTypeTag,
    TupleTypeResolver,
    TypeAliasTable,
    abi_type_to_ts,
    ts_imports_for,
)
from abi_transform.codegen import (
    AbiManifestBuilder,
    CodeGenerationContext,
    DispatchSynthesizer,
    MethodAbiAssembler,
    SelectorEncoder,
    TransformDiagnostics,
    encode_selector,
    AUTO_INJECTED_MARKER,
)


def dec(name, *args):
    """Decorator with quoted raw arguments, as the host hands them over."""
    return Decorator(name=name, args=[f"'{a}'" for a in args])


def token_class():
    return ClassDeclaration(
        name='Token',
        base_class='OP20',
        members=[
            FieldDeclaration(name='supply', type_text='u256'),
            MethodDeclaration(
                name='transfer',
                decorators=[
                    dec('method', '{ name: "to", type: ABIDataTypes.ADDRESS }',
                        '{ name: "amount", type: ABIDataTypes.UINT256 }'),
                    dec('returns', '{ name: "success", type: ABIDataTypes.BOOL }'),
                    dec('emit', 'Transferred'),
                ],
            ),
            MethodDeclaration(
                name='balanceOf',
                decorators=[dec('method', 'address'), dec('returns', 'u256'), dec('view')],
            ),
            MethodDeclaration(name='helper'),
        ],
    )


def transferred_event():
    return ClassDeclaration(
        name='TransferredEvent',
        decorators=[dec('event', 'Transferred')],
        members=[
            FieldDeclaration(name='from', type_text='Address'),
            FieldDeclaration(name='amount', type_text='u256'),
            FieldDeclaration(name='untyped'),
        ],
    )


def token_sources():
    return [HostSource(internal_path='src/Token.ts', classes=[token_class(), transferred_event()])]


class TestTypeAliasTable(unittest.TestCase):
    """Test spelling resolution and canonical spellings."""

    def setUp(self):
        self.table = TypeAliasTable()

    def test_every_alias_round_trips_through_its_canonical_spelling(self):
        for spelling, tag in STR_TO_ABI_TYPE.items():
            canonical = self.table.canonicalize(tag)
            self.assertEqual(self.table.resolve(canonical), tag, spelling)

    def test_canonical_spellings_are_lower_camel(self):
        for tag, canonical in ABI_TYPE_TO_STR.items():
            self.assertFalse(canonical[0].isupper(), canonical)
            self.assertNotIn('Map', canonical)
            self.assertNotIn('_', canonical)

    def test_every_tag_has_one_canonical_spelling(self):
        self.assertEqual(set(ABI_TYPE_TO_STR), set(AbiTypeTag))

    def test_runtime_aliases(self):
        self.assertEqual(self.table.resolve('u256'), AbiTypeTag.UINT256)
        self.assertEqual(self.table.resolve('i8'), AbiTypeTag.INT8)
        self.assertEqual(self.table.resolve('boolean'), AbiTypeTag.BOOL)
        self.assertEqual(self.table.resolve('Uint8Array'), AbiTypeTag.BYTES)
        self.assertEqual(self.table.resolve('Address[]'), AbiTypeTag.ARRAY_OF_ADDRESSES)

    def test_legacy_snake_case_spellings(self):
        self.assertEqual(self.table.canonical_spelling('extended_address'), 'extendedAddress')
        self.assertEqual(self.table.canonical_spelling('schnorr_signature'), 'schnorrSignature')

    def test_enum_qualified_spellings(self):
        for tag in AbiTypeTag:
            self.assertEqual(self.table.resolve(f'ABIDataTypes.{tag.value}'), tag)
        self.assertTrue(TypeAliasTable.is_enum_qualified('ABIDataTypes.UINT8'))

    def test_lookup_is_case_sensitive(self):
        self.assertIsNone(self.table.resolve('UINT256'))
        self.assertIsNone(self.table.resolve('Bool'))

    def test_no_signed_256_bit_integer(self):
        self.assertIsNone(self.table.resolve('int256'))
        self.assertIsNone(self.table.resolve('i256'))

    def test_address_map_idiom(self):
        tag = self.table.resolve('AddressMap<u256>')
        self.assertEqual(tag, AbiTypeTag.ADDRESS_UINT256_TUPLE)
        self.assertEqual(self.table.canonicalize(tag), 'tuple(address,uint256)[]')


class TestTupleTypeResolver(unittest.TestCase):
    """Test the tuple grammar and the two reserved idioms."""

    def setUp(self):
        self.tuples = TupleTypeResolver()

    def test_grammar(self):
        self.assertTrue(self.tuples.is_tuple_string('tuple(address,uint256)[]'))
        self.assertFalse(self.tuples.is_tuple_string('tuple(address,uint256)'))
        self.assertFalse(self.tuples.is_tuple_string('tuple()[]'))
        self.assertFalse(self.tuples.is_tuple_string('tuple((address),uint256)[]'))
        self.assertFalse(self.tuples.is_tuple_string(' tuple(address,uint256)[]'))

    def test_is_tuple_string_iff_inner_types_parse(self):
        for value in ['tuple(address,uint256)[]', 'tuple(a)[]', 'tuple()[]', 'notATuple',
                      'tuple(address,uint256)[][]']:
            self.assertEqual(
                self.tuples.is_tuple_string(value),
                bool(self.tuples.parse_inner_types(value)),
                value,
            )

    def test_parse_inner_types_trims(self):
        self.assertEqual(
            self.tuples.parse_inner_types('tuple(address, uint256)[]'),
            ['address', 'uint256'],
        )
        self.assertEqual(self.tuples.parse_inner_types('address'), [])

    def test_validate_inner_types(self):
        self.assertEqual(self.tuples.validate_inner_types('tuple(address,foobar)[]'), ['foobar'])
        self.assertEqual(self.tuples.validate_inner_types('tuple(address,uint256)[]'), [])
        self.assertEqual(self.tuples.validate_inner_types('notATuple'), ['notATuple'])

    def test_canonicalize_tuple_string(self):
        self.assertEqual(
            self.tuples.canonicalize_tuple_string('tuple(Address, u256)[]'),
            'tuple(address,uint256)[]',
        )
        self.assertIsNone(self.tuples.canonicalize_tuple_string('tuple(address,foobar)[]'))
        self.assertIsNone(self.tuples.canonicalize_tuple_string('address'))

    def test_canonicalize_is_a_fixed_point_on_canonical_tuples(self):
        for value in ['tuple(address,uint256)[]', 'tuple(extendedAddress,uint256)[]',
                      'tuple(bool,string,bytes32)[]']:
            self.assertEqual(self.tuples.canonicalize_tuple_string(value), value)

    def test_reserved_idioms_resolve(self):
        self.assertEqual(
            self.tuples.resolve_tuple_or_scalar('tuple(Address,u256)[]'),
            AbiTypeTag.ADDRESS_UINT256_TUPLE,
        )
        self.assertEqual(
            self.tuples.resolve_tuple_or_scalar('tuple(extended_address,uint256)[]'),
            AbiTypeTag.EXTENDED_ADDRESS_UINT256_TUPLE,
        )
        self.assertEqual(
            self.tuples.resolve_tuple_or_scalar('ExtendedAddressMap<u256>'),
            AbiTypeTag.EXTENDED_ADDRESS_UINT256_TUPLE,
        )

    def test_other_valid_tuples_do_not_resolve(self):
        self.assertIsNone(self.tuples.resolve_tuple_or_scalar('tuple(address,bool)[]'))
        self.assertIsNone(self.tuples.resolve_tuple_or_scalar('tuple(uint256,address)[]'))

    def test_scalars_fall_through_to_aliases(self):
        self.assertEqual(self.tuples.resolve_tuple_or_scalar('u64'), AbiTypeTag.UINT64)
        self.assertIsNone(self.tuples.resolve_tuple_or_scalar('foobar'))


class TestTypeHints(unittest.TestCase):

    def test_hints(self):
        self.assertEqual(abi_type_to_ts(AbiTypeTag.UINT32), 'number')
        self.assertEqual(abi_type_to_ts(AbiTypeTag.UINT64), 'bigint')
        self.assertEqual(abi_type_to_ts(AbiTypeTag.EXTENDED_ADDRESS), 'Address')
        self.assertEqual(abi_type_to_ts(AbiTypeTag.ADDRESS_UINT256_TUPLE), 'AddressMap<bigint>')
        self.assertEqual(abi_type_to_ts(AbiTypeTag.ARRAY_OF_BUFFERS), 'Uint8Array[]')
        self.assertEqual(abi_type_to_ts(AbiTypeTag.ARRAY_OF_UINT16), 'number[]')

    def test_every_tag_has_a_hint(self):
        for tag in AbiTypeTag:
            self.assertNotEqual(abi_type_to_ts(tag), 'unknown', tag)

    def test_transaction_library_imports(self):
        self.assertEqual(ts_imports_for('Address[]'), {'Address'})
        self.assertEqual(ts_imports_for('ExtendedAddressMap<bigint>'), {'ExtendedAddressMap'})
        self.assertEqual(ts_imports_for('bigint'), set())


class TestNamedParameterLiteral(unittest.TestCase):

    def test_named_parameter(self):
        self.assertEqual(
            try_parse_named_parameter("{ name: 'to', type: ABIDataTypes.ADDRESS }"),
            NamedParameter(name='to', type='ABIDataTypes.ADDRESS'),
        )

    def test_repairs_near_misses(self):
        expected = NamedParameter(name='a', type='u256')
        for text in [
            "{ name: 'a', type: 'u256', }",
            '{ "name": "a", "type": "u256" }',
        ]:
            self.assertEqual(try_parse_named_parameter(text), expected, text)

    def test_failures_are_typed(self):
        for text in ['address', "{ name: 'a' }", '{ : }', "{ name: 1, type: 'u8' }"]:
            result = try_parse_named_parameter(text)
            self.assertIsInstance(result, LiteralParseFailure, text)
            self.assertEqual(result.text, text)

    def test_deeply_nested_literal_is_a_typed_failure(self):
        text = '{a:' + '[' * 5000 + '}'
        self.assertIsInstance(try_parse_named_parameter(text), LiteralParseFailure)


class TestParameterDefinitionParser(unittest.TestCase):
    """Test @method argument classification."""

    def setUp(self):
        self.params = ParameterDefinitionParser()

    def test_all_type_spellings_is_a_parameter_list(self):
        classified = self.params.classify_method_arguments(['address', 'uint256', 'bool'])
        self.assertIsInstance(classified, ParameterList)
        self.assertEqual(classified.params, ['address', 'uint256', 'bool'])
        name, params = self.params.parse_method_arguments(['address', 'uint256', 'bool'], 'foo')
        self.assertEqual(name, 'foo')
        self.assertEqual(len(params), 3)

    def test_single_non_type_is_a_name_override(self):
        classified = self.params.classify_method_arguments(['myMethodName'])
        self.assertEqual(classified, NameOverride('myMethodName', []))

    def test_name_override_with_parameters(self):
        name, params = self.params.parse_method_arguments(
            ['myMethodName', "{ name: 'to', type: 'address' }", 'u256'], 'foo'
        )
        self.assertEqual(name, 'myMethodName')
        self.assertEqual(params, [NamedParameter('to', 'address'), 'u256'])

    def test_no_arguments(self):
        self.assertEqual(self.params.parse_method_arguments([], 'foo'), ('foo', []))

    def test_named_first_argument(self):
        classified = self.params.classify_method_arguments(
            ["{ name: 'to', type: ABIDataTypes.ADDRESS }"]
        )
        self.assertIsInstance(classified, ParameterList)

    def test_override_that_is_also_a_type_reads_as_parameter(self):
        classified = self.params.classify_method_arguments(['bytes'])
        self.assertIsInstance(classified, ParameterList)

    def test_enum_qualified_and_tuple_arguments_are_types(self):
        self.assertTrue(self.params.looks_like_type('ABIDataTypes.NOT_A_TAG'))
        self.assertTrue(self.params.looks_like_type('tuple(Address,u256)[]'))
        self.assertFalse(self.params.looks_like_type('tuple(address,bool)[]'))

    def test_malformed_literal_is_kept_verbatim(self):
        self.assertEqual(self.params.parse_param_definition(" { name: 'x' } "), "{ name: 'x' }")

    def test_malformed_first_literal_becomes_the_name_override(self):
        classified = self.params.classify_method_arguments(["{ name: 'x' }", 'address'])
        self.assertEqual(classified, NameOverride("{ name: 'x' }", ['address']))

    def test_deeply_nested_first_argument_does_not_raise(self):
        nested = '{a:' + '[' * 5000 + '}'
        classified = self.params.classify_method_arguments([nested, 'u8'])
        self.assertEqual(classified, NameOverride(nested, ['u8']))


class TestSelectorEncoder(unittest.TestCase):

    def setUp(self):
        self.encoder = SelectorEncoder()

    def test_selector_is_truncated_sha256(self):
        expected = hashlib.sha256(b'transfer(address,uint256)').digest()[:4].hex()
        self.assertEqual(encode_selector('transfer(address,uint256)'), expected)

    def test_selector_format(self):
        selector = encode_selector('transfer(address,uint256)')
        self.assertRegex(selector, r'^[0-9a-f]{8}$')
        self.assertEqual(selector, encode_selector('transfer(address,uint256)'))

    def test_signature(self):
        self.assertEqual(
            self.encoder.encode('transfer', ['address', 'uint256'])[0],
            'transfer(address,uint256)',
        )
        self.assertEqual(self.encoder.build_signature('totalSupply', []), 'totalSupply()')

    def test_canonical_types_ignore_naming_and_alias(self):
        named = self.encoder.canonical_types([NamedParameter('to', 'Address'), 'u256'])
        bare = self.encoder.canonical_types(['address', 'ABIDataTypes.UINT256'])
        self.assertEqual(named, ['address', 'uint256'])
        self.assertEqual(named, bare)

    def test_tuple_canonical_type(self):
        self.assertEqual(self.encoder.canonical_type('AddressMap<u256>'), 'tuple(address,uint256)[]')
        self.assertIsNone(self.encoder.canonical_type('foobar'))


class TestMethodAbiAssembler(unittest.TestCase):
    """Test annotation collection and record merging."""

    def test_annotation_sites_merge_into_one_record(self):
        assembler = MethodAbiAssembler()
        assembler.visit_sources(token_sources())
        records = assembler.methods_by_class['Token']
        self.assertEqual([r.method_name for r in records], ['transfer', 'balanceOf'])

        transfer = records[0]
        self.assertEqual(len(transfer.param_defs), 2)
        self.assertEqual(transfer.return_defs, [NamedParameter('success', 'ABIDataTypes.BOOL')])
        self.assertEqual(transfer.emitted_events, ['Transferred'])
        self.assertFalse(transfer.is_view)
        self.assertTrue(records[1].is_view)

    def test_flags_before_method_annotation(self):
        method = MethodDeclaration(
            name='mint',
            decorators=[dec('payable'), dec('onlyOwner'), dec('emit', 'Minted', 'Minted'),
                        dec('method', 'address')],
        )
        assembler = MethodAbiAssembler()
        assembler.visit_class(ClassDeclaration(name='Token', members=[method]))
        record = assembler.records()[0]
        self.assertTrue(record.is_payable)
        self.assertTrue(record.only_owner)
        self.assertEqual(record.emitted_events, ['Minted'])

    def test_name_override_keeps_declared_name(self):
        method = MethodDeclaration(name='doTransfer', decorators=[dec('method', 'transfer', 'address')])
        assembler = MethodAbiAssembler()
        assembler.visit_class(ClassDeclaration(name='Token', members=[method]))
        record = assembler.records()[0]
        self.assertEqual(record.method_name, 'transfer')
        self.assertEqual(record.declared_name, 'doTransfer')

    def test_same_name_declarations_get_separate_records(self):
        first = MethodDeclaration(name='run', decorators=[dec('method', 'u8')])
        second = MethodDeclaration(name='run', decorators=[dec('method', 'u16')])
        assembler = MethodAbiAssembler()
        assembler.visit_class(ClassDeclaration(name='A', members=[first, second]))
        records = assembler.records()
        self.assertEqual(len(records), 2)
        self.assertNotEqual(records[0].declaration_id, records[1].declaration_id)

    def test_revisiting_a_declaration_does_not_duplicate(self):
        cls = token_class()
        assembler = MethodAbiAssembler()
        assembler.visit_class(cls)
        assembler.visit_class(cls)
        self.assertEqual(len(assembler.records()), 2)

    def test_events_are_collected_from_marked_classes(self):
        assembler = MethodAbiAssembler()
        assembler.visit_sources(token_sources())
        self.assertEqual(assembler.declared_event_names(), ['Transferred'])
        event = assembler.find_event('Transferred')
        self.assertEqual([(f.name, f.type) for f in event.fields], [('from', 'Address'), ('amount', 'u256')])

    def test_event_name_defaults_to_class_name(self):
        cls = ClassDeclaration(name='Burned', decorators=[Decorator('event')],
                               members=[FieldDeclaration('amount', 'u256')])
        assembler = MethodAbiAssembler()
        assembler.visit_class(cls)
        self.assertEqual(assembler.declared_event_names(), ['Burned'])

    def test_std_lib_sources_are_skipped(self):
        sources = [
            HostSource(internal_path='~lib/token.ts', classes=[token_class()]),
            HostSource(internal_path='node_modules/lib.ts', classes=[token_class()], is_library=True),
        ]
        assembler = MethodAbiAssembler()
        assembler.visit_sources(sources)
        self.assertEqual(assembler.records(), [])

    def test_event_diagnostics(self):
        method = MethodDeclaration(name='burn', decorators=[dec('method'), dec('emit', 'Ghost')])
        unused = ClassDeclaration(name='Minted', decorators=[Decorator('event')])
        assembler = MethodAbiAssembler()
        assembler.visit_class(ClassDeclaration(name='Token', members=[method]))
        assembler.visit_class(unused)

        diagnostics = TransformDiagnostics()
        assembler.check_unused_events(diagnostics)
        self.assertEqual(diagnostics.codes(), ['W002', 'W001'])
        self.assertIn('Ghost', diagnostics.first('W002').message)
        self.assertIn('Minted', diagnostics.first('W001').message)

    def test_emit_without_method_annotation_counts_as_reference(self):
        method = MethodDeclaration(name='mint', decorators=[dec('emit', 'Minted'), dec('payable')])
        event = ClassDeclaration(name='Minted', decorators=[Decorator('event')])
        assembler = MethodAbiAssembler()
        assembler.visit_class(ClassDeclaration(name='Token', members=[method]))
        assembler.visit_class(event)

        diagnostics = TransformDiagnostics()
        assembler.check_unused_events(diagnostics)
        self.assertEqual(diagnostics.codes(), [])
        self.assertEqual(assembler.records(), [])
        self.assertEqual(assembler._pending, {})

    def test_missing_declaration_is_fatal(self):
        assembler = MethodAbiAssembler()
        assembler.visit_sources(token_sources())
        with self.assertRaises(DeclarationNotFoundError) as cm:
            assembler.resolve_internal_names(HostProgram())
        self.assertIn('Token.transfer', str(cm.exception))

    def test_internal_names(self):
        sources = token_sources()
        assembler = MethodAbiAssembler()
        assembler.visit_sources(sources)
        assembler.resolve_internal_names(HostProgram.from_sources(assembler.arena, sources))
        self.assertEqual(assembler.records()[0].internal_name, 'src/Token/Token#transfer')


class TestAbiManifestBuilder(unittest.TestCase):

    def build(self, *classes):
        assembler = MethodAbiAssembler()
        for cls in classes:
            assembler.visit_class(cls)
        return assembler, AbiManifestBuilder(assembler)

    def test_function_entries(self):
        _, builder = self.build(token_class(), transferred_event())
        abi = builder.build_abi()
        transfer, balance_of = abi.functions

        self.assertEqual(transfer.to_dict(), {
            'name': 'transfer',
            'type': 'Function',
            'payable': False,
            'onlyOwner': False,
            'inputs': [{'name': 'to', 'type': 'ADDRESS'}, {'name': 'amount', 'type': 'UINT256'}],
            'outputs': [{'name': 'success', 'type': 'BOOL'}],
        })
        self.assertEqual(balance_of.type, 'View')
        self.assertEqual(balance_of.inputs[0].name, 'param1')
        self.assertEqual(balance_of.outputs[0].name, 'returnVal1')
        self.assertEqual(balance_of.outputs[0].type_hint, 'bigint')

    def test_selector_matches_canonical_signature(self):
        _, builder = self.build(token_class())
        transfer = builder.build_abi().functions[0]
        self.assertEqual(transfer.signature, 'transfer(address,uint256)')
        self.assertEqual(transfer.selector, encode_selector('transfer(address,uint256)'))

    def test_no_returns_means_empty_outputs(self):
        cls = ClassDeclaration(name='A', members=[MethodDeclaration('ping', [dec('method')])])
        _, builder = self.build(cls)
        entry = builder.build_abi().functions[0]
        self.assertEqual(entry.outputs, [])
        self.assertEqual(entry.signature, 'ping()')

    def test_event_entries(self):
        _, builder = self.build(token_class(), transferred_event())
        event = builder.build_abi().events[0]
        self.assertEqual(event.to_dict(), {
            'name': 'Transferred',
            'values': [{'name': 'from', 'type': 'ADDRESS'}, {'name': 'amount', 'type': 'UINT256'}],
            'type': 'Event',
        })

    def test_unresolved_type_is_fatal(self):
        cls = ClassDeclaration(name='A', members=[MethodDeclaration('f', [dec('method', 'u8', 'foobar')])])
        _, builder = self.build(cls)
        with self.assertRaises(UnresolvedTypeError) as cm:
            builder.build_abi()
        self.assertEqual(cm.exception.spelling, 'foobar')
        self.assertIn('A.f', str(cm.exception))
        self.assertIsInstance(cm.exception, AbiTransformError)

    def test_unresolved_event_field_is_fatal(self):
        event = ClassDeclaration(name='E', decorators=[Decorator('event')],
                                 members=[FieldDeclaration('value', 'Map<u8>')])
        _, builder = self.build(event)
        with self.assertRaises(UnresolvedTypeError) as cm:
            builder.build_abi()
        self.assertEqual(cm.exception.kind, 'event')

    def test_malformed_literal_surfaces_as_unresolved_type(self):
        cls = ClassDeclaration(name='A', members=[MethodDeclaration('f', [dec('method', 'address', "{ name: 'x' }")])])
        _, builder = self.build(cls)
        with self.assertRaises(UnresolvedTypeError):
            builder.build_abi()

    def test_per_class_events_are_emitted_events(self):
        vault = ClassDeclaration(name='Vault', members=[MethodDeclaration('lock', [dec('method')])])
        _, builder = self.build(token_class(), vault, transferred_event())
        per_class = builder.build_abi_per_class()
        self.assertEqual(sorted(per_class), ['Token', 'Vault'])
        self.assertEqual([e.name for e in per_class['Token'].events], ['Transferred'])
        self.assertEqual(per_class['Vault'].events, [])


class TestCodeGenerationContext(unittest.TestCase):

    def test_reset_clears_per_class_state(self):
        ctx = CodeGenerationContext()
        ctx.indent_level = 2
        ctx.transaction_imports.add('Address')
        ctx.diagnostics.warn_class_not_found('Ghost')
        ctx.reset_for_class()
        self.assertEqual(ctx.indent(), '')
        self.assertEqual(ctx.transaction_imports, set())
        self.assertEqual(ctx.diagnostics.codes(), ['W003'])


class TestDispatchSynthesizer(unittest.TestCase):

    def setUp(self):
        self.assembler = MethodAbiAssembler()
        self.token = token_class()
        self.assembler.visit_class(self.token)
        self.ctx = CodeGenerationContext()
        self.synthesizer = DispatchSynthesizer(self.ctx, AbiManifestBuilder(self.assembler))

    def records(self):
        return self.assembler.methods_by_class['Token']

    def test_routing_body(self):
        source = self.synthesizer.build_execute_method('Token', self.records())
        lines = source.split('\n')
        self.assertEqual(lines[0], AUTO_INJECTED_MARKER)
        self.assertIn('public override execute(selector: u32, calldata: Calldata): BytesWriter {', lines[1])
        self.assertEqual(
            lines[2].strip(),
            f"if (selector == 0x{encode_selector('transfer(address,uint256)')}) "
            f"return this.transfer(calldata);",
        )
        self.assertEqual(
            lines[3].strip(),
            f"if (selector == 0x{encode_selector('balanceOf(address)')}) "
            f"return this.balanceOf(calldata);",
        )
        self.assertEqual(lines[4].strip(), 'return super.execute(selector, calldata);')
        self.assertEqual(lines[5], '}')

    def test_routes_to_declared_name(self):
        method = MethodDeclaration(name='doTransfer', decorators=[dec('method', 'transfer', 'address')])
        assembler = MethodAbiAssembler()
        assembler.visit_class(ClassDeclaration(name='A', members=[method]))
        synthesizer = DispatchSynthesizer(self.ctx, AbiManifestBuilder(assembler))
        source = synthesizer.build_execute_method('A', assembler.records())
        self.assertIn(f"0x{encode_selector('transfer(address)')}", source)
        self.assertIn('return this.doTransfer(calldata);', source)

    def test_appends_when_absent(self):
        count = len(self.token.members)
        self.synthesizer.inject(self.token, self.records())
        self.assertEqual(len(self.token.members), count + 1)
        self.assertTrue(self.token.members[-1].is_synthesized)
        self.assertEqual(self.ctx.diagnostics.codes(), [])

    def test_replaces_existing_execute_in_place(self):
        self.token.members.insert(1, MethodDeclaration(name='execute', source='old'))
        count = len(self.token.members)
        self.synthesizer.inject(self.token, self.records())
        self.assertEqual(len(self.token.members), count)
        self.assertEqual(self.token.members[1].name, 'execute')
        self.assertTrue(self.token.members[1].is_synthesized)
        self.assertEqual(self.ctx.diagnostics.codes(), ['I001'])

    def test_injection_is_idempotent(self):
        self.synthesizer.inject(self.token, self.records())
        first = [(m.name, getattr(m, 'source', None)) for m in self.token.members]
        self.synthesizer.inject(self.token, self.records())
        second = [(m.name, getattr(m, 'source', None)) for m in self.token.members]
        self.assertEqual(first, second)

    def test_missing_class_declaration_warns(self):
        injected = self.synthesizer.inject_all({'Ghost': self.records()}, {})
        self.assertEqual(injected, {})
        self.assertEqual(self.ctx.diagnostics.codes(), ['W003'])


class TestHostLoader(unittest.TestCase):

    DUMP = {'sources': [{'path': 'src/Token.ts', 'classes': [
        {'name': 'Token', 'extends': 'OP20', 'members': [
            {'kind': 'method', 'name': 'transfer',
             'decorators': [{'name': 'method', 'args': ["'address'", '"uint256"']}]},
            {'kind': 'field', 'name': 'supply', 'type': 'u256'},
        ]},
    ]}]}

    def test_load_sources(self):
        sources = load_sources(self.DUMP)
        cls = sources[0].classes[0]
        self.assertEqual(cls.base_class, 'OP20')
        self.assertEqual(cls.methods()[0].decorators[0].unquoted_args(), ['address', 'uint256'])
        self.assertEqual(cls.fields()[0].type_text, 'u256')
        self.assertFalse(sources[0].is_std_lib)

    def test_unquote(self):
        self.assertEqual(unquote('"\'x\'"'), 'x')
        self.assertEqual(unquote("'"), "'")

    def test_malformed_dumps(self):
        for data in [
            {},
            {'sources': [{'classes': []}]},
            {'sources': [{'path': 'a.ts', 'classes': [{'name': 'A', 'members': [{'kind': 'ctor', 'name': 'x'}]}]}]},
            {'sources': [{'path': 'a.ts', 'classes': [{'name': 'A', 'decorators': [{'name': 'event', 'args': [1]}]}]}]},
        ]:
            with self.assertRaises(HostInputError):
                load_sources(data)

    def test_invalid_json_file(self):
        with tempfile.NamedTemporaryFile('w', suffix='.json', delete=False) as f:
            f.write('{ not json')
        try:
            with self.assertRaises(HostInputError) as cm:
                load_sources_from_file(f.name)
            self.assertEqual(cm.exception.path, f.name)
        finally:
            os.unlink(f.name)

    def test_arena_handles_are_stable(self):
        arena = DeclarationArena()
        method = MethodDeclaration(name='a')
        first = arena.add(method, 'A')
        self.assertEqual(arena.add(method, 'A'), first)
        self.assertEqual(arena.owner_of(first), 'A')
        self.assertEqual(len(arena), 1)


class TestAbiTransform(unittest.TestCase):
    """End-to-end tests of the transform pass and its generated files."""

    def run_transform(self, **kwargs):
        transform = AbiTransform(output_dir='out', **kwargs)
        return transform, transform.transform(token_sources())

    def test_output_map(self):
        _, results = self.run_transform()
        self.assertEqual(sorted(results), [
            os.path.join('out', 'abi.json'),
            os.path.join('out', 'abis', 'Token.abi.ts'),
            os.path.join('out', 'abis', 'Token.d.ts'),
        ])

    def test_manifest_json(self):
        _, results = self.run_transform()
        content = results[os.path.join('out', 'abi.json')]
        self.assertTrue(content.startswith('{\n    "functions"'))
        manifest = json.loads(content)
        self.assertEqual([f['name'] for f in manifest['functions']], ['transfer', 'balanceOf'])
        self.assertEqual([e['name'] for e in manifest['events']], ['Transferred'])

    def test_no_typescript(self):
        _, results = self.run_transform(emit_typescript=False)
        self.assertEqual(list(results), [os.path.join('out', 'abi.json')])

    def test_execute_is_injected(self):
        transform, _ = self.run_transform()
        self.assertIn('Token', transform.dispatch_sources)
        self.assertNotIn('TransferredEvent', transform.dispatch_sources)

    def test_abi_fragment(self):
        _, results = self.run_transform()
        output = results[os.path.join('out', 'abis', 'Token.abi.ts')]
        self.assertIn("import { ABIDataTypes, BitcoinAbiTypes, OP_NET_ABI } from 'opnet';", output)
        self.assertIn('export const TokenEvents = [', output)
        self.assertIn("{ name: 'to', type: ABIDataTypes.ADDRESS },", output)
        self.assertIn('constant: true,', output)
        self.assertIn('type: BitcoinAbiTypes.Event,', output)
        self.assertIn('...TokenEvents,', output)
        self.assertIn('...OP_NET_ABI,', output)
        self.assertIn('export default TokenAbi;', output)

    def test_declaration_fragment(self):
        _, results = self.run_transform()
        output = results[os.path.join('out', 'abis', 'Token.d.ts')]
        self.assertIn("import { Address } from '@btc-vision/transaction';", output)
        self.assertIn("import { CallResult, IOP_NETContract, OPNetEvent } from 'opnet';", output)
        self.assertIn('export type TransferredEvent = {', output)
        self.assertIn('readonly from: Address;', output)
        self.assertIn('export type Transfer = CallResult<', output)
        self.assertIn('OPNetEvent<TransferredEvent>[]', output)
        self.assertIn('OPNetEvent<never>[]', output)
        self.assertIn('export interface IToken extends IOP_NETContract {', output)
        self.assertIn('transfer(to: Address, amount: bigint): Promise<Transfer>;', output)
        self.assertIn('balanceOf(param1: Address): Promise<BalanceOf>;', output)

    def test_unused_event_diagnostic(self):
        sources = token_sources()
        sources[0].classes[0].members[1].decorators.pop()  # drop @emit
        transform = AbiTransform(output_dir='out')
        transform.transform(sources)
        self.assertEqual(transform.diagnostics.codes(), ['W001'])
        self.assertIn('1 event', transform.diagnostics.get_summary())

    def test_missing_declaration_aborts(self):
        with self.assertRaises(DeclarationNotFoundError):
            AbiTransform().transform(token_sources(), HostProgram())


class TestCli(unittest.TestCase):

    def write_dump(self, directory):
        path = os.path.join(directory, 'decls.json')
        with open(path, 'w') as f:
            json.dump(TestHostLoader.DUMP, f)
        return path

    def test_writes_files(self):
        with tempfile.TemporaryDirectory() as tmp:
            out_dir = os.path.join(tmp, 'out')
            stdout = io.StringIO()
            with redirect_stdout(stdout), redirect_stderr(io.StringIO()):
                code = main([self.write_dump(tmp), '-o', out_dir])
            self.assertEqual(code, 0)
            self.assertTrue(os.path.exists(os.path.join(out_dir, 'abi.json')))
            self.assertTrue(os.path.exists(os.path.join(out_dir, 'abis', 'Token.d.ts')))
            self.assertIn('Written: ', stdout.getvalue())

    def test_stdout(self):
        with tempfile.TemporaryDirectory() as tmp:
            stdout = io.StringIO()
            with redirect_stdout(stdout), redirect_stderr(io.StringIO()):
                code = main([self.write_dump(tmp), '-o', os.path.join(tmp, 'out'), '--stdout'])
            self.assertEqual(code, 0)
            self.assertFalse(os.path.exists(os.path.join(tmp, 'out')))
            self.assertIn('"functions"', stdout.getvalue())
            self.assertTrue(re.search(r'return this\.transfer\(calldata\);', stdout.getvalue()))

    def test_error_exit(self):
        stderr = io.StringIO()
        with redirect_stderr(stderr):
            code = main([os.path.join(tempfile.gettempdir(), 'missing-decls.json')])
        self.assertEqual(code, 1)
        self.assertTrue(stderr.getvalue().startswith('Error: '))


if __name__ == '__main__':
    # Run tests with verbosity
    unittest.main(verbosity=2)
