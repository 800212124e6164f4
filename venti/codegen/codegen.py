"""
LLVM code generation for Venti.

Walks the AST once, in order, and builds an LLVM IR module with llvmlite:

- every declared name becomes a module-level global whose initializer is
  the constant-folded declaration value;
- every async declaration becomes a ``void ()`` function;
- top-level statements that need instructions go into ``i32 @main()``,
  which is created on first use and finished with ``ret i32 0``;
- output goes through the C ``printf`` function.

Author: xwest
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set

import llvmlite.ir as ll

from ..config import CompilerConfig
from ..errors import CodegenError
from ..parser.ast_nodes import (
    BinOp, Expression, Statement, Program,
    NumberLiteral, FloatLiteral, BooleanLiteral, StringLiteral, Identifier,
    BinaryOp, ArrayLiteral, AsyncWrap, AwaitUnwrap,
    VariableDeclaration, VariableAssignment, Print, FunctionCall,
    AsyncFunctionDeclaration,
)
from .errors import (
    create_undefined_variable_error, create_undefined_function_error,
    create_type_mismatch_error, create_operand_error, create_arity_error,
    create_not_constant_error, create_division_by_zero_error,
    create_name_conflict_error, create_unsupported_error,
)
from .values import (
    ValueKind, ValueType, Constant, Value, INT, FLOAT, BOOL, STRING,
    I8, I32, I64, F64, I1, I8_PTR, VOID, array_of, fold_binary,
)

logger = logging.getLogger(__name__)

ENTRY_FUNCTION = "main"
PRINTF = "printf"
RESERVED_NAMES = frozenset({ENTRY_FUNCTION, PRINTF})

PRINT_SPECIFIERS = {
    ValueKind.INT: "%lld",
    ValueKind.FLOAT: "%f",
    ValueKind.BOOL: "%d",
    ValueKind.STRING: "%s",
}


@dataclass
class GlobalBinding:
    """A declared name and the global currently holding its value."""
    name: str
    type: ValueType
    variable: ll.GlobalVariable
    constant: Optional[Constant]  # None once the value is only known at run time


@dataclass
class CodeGenContext:
    """State of one lowering pass."""
    module: ll.Module
    printf: ll.Function
    bindings: Dict[str, GlobalBinding] = field(default_factory=dict)
    functions: Dict[str, ll.Function] = field(default_factory=dict)
    strings: Dict[str, ll.GlobalVariable] = field(default_factory=dict)

    # Names each function may store to, including through the functions it calls
    function_effects: Dict[str, Set[str]] = field(default_factory=dict)

    entry_builder: Optional[ll.IRBuilder] = None
    builder: Optional[ll.IRBuilder] = None  # set while lowering a function body
    current_function: Optional[str] = None


class CodeGen:
    """
    Lowers a Program to an LLVM IR module.

    A CodeGen can be reused; every call to ``lower`` starts from fresh
    state, so lowering the same program twice yields identical text.
    """

    def __init__(self, config: Optional[CompilerConfig] = None):
        self.config = config or CompilerConfig()
        self.context: Optional[CodeGenContext] = None

    def lower(self, program: Program) -> ll.Module:
        """
        Lower a program to an llvmlite module.

        Raises:
            CodegenError: On the first lowering failure
        """
        self.context = self._create_context()

        for statement in program.statements:
            self._lower_statement(statement)

        if self.context.entry_builder is not None:
            self.context.entry_builder.ret(ll.Constant(I32, 0))

        module = self.context.module
        logger.debug("Lowered %d statements into module '%s'", len(program.statements), module.name)
        return module

    def compile(self, program: Program) -> str:
        """Lower a program and return the module as LLVM assembly text."""
        return str(self.lower(program))

    def _create_context(self) -> CodeGenContext:
        module = ll.Module(name=self.config.module_name)
        module.triple = self.config.resolve_target_triple()

        printf_type = ll.FunctionType(I32, [I8_PTR], var_arg=True)
        printf = ll.Function(module, printf_type, name=PRINTF)
        return CodeGenContext(module=module, printf=printf)

    # ========================================================================
    # Statements
    # ========================================================================

    def _lower_statement(self, statement: Statement):
        """Lower one statement into the current function."""
        logger.debug("Lowering %s at %s", type(statement).__name__, statement.location)

        if isinstance(statement, VariableDeclaration):
            self._lower_variable_declaration(statement)
        elif isinstance(statement, VariableAssignment):
            self._lower_variable_assignment(statement)
        elif isinstance(statement, Print):
            self._lower_print(statement)
        elif isinstance(statement, FunctionCall):
            self._lower_function_call(statement)
        elif isinstance(statement, AsyncFunctionDeclaration):
            self._lower_async_function(statement)
        else:
            raise create_unsupported_error(f"statement {type(statement).__name__}", statement.location)

    def _lower_variable_declaration(self, statement: VariableDeclaration):
        name = statement.name
        self._check_global_name(name, statement.location)

        constant = self._fold_initializer(name, statement.initializer)
        initializer = self._constant_to_llvm(constant)
        binding = self.context.bindings.get(name)

        if binding is not None and binding.type == constant.type:
            if self._has_emitted_code():
                self._store_constant(binding, constant)
            else:
                binding.variable.initializer = initializer
                binding.constant = constant
            return

        module = self.context.module
        symbol = name if binding is None else module.get_unique_name(name)
        variable = ll.GlobalVariable(module, constant.type.llvm_type(), name=symbol)
        variable.initializer = initializer
        self.context.bindings[name] = GlobalBinding(name, constant.type, variable, constant)

    def _has_emitted_code(self) -> bool:
        """True once a statement may run before the current one at run time."""
        return self.context.entry_builder is not None or self.context.current_function is not None

    def _store_constant(self, binding: GlobalBinding, constant: Constant):
        """Redeclaration after code exists: store the new value in program order."""
        builder = self._builder()
        if constant.type.is_array:
            zero = ll.Constant(I64, 0)
            for index, element in enumerate(constant.value):
                target = builder.gep(binding.variable, [zero, ll.Constant(I64, index)], inbounds=True)
                builder.store(self._constant_to_llvm(element), target)
        else:
            builder.store(self._constant_to_llvm(constant), binding.variable)

        if self.context.current_function is None:
            binding.constant = constant
        else:
            self.context.function_effects[self.context.current_function].add(binding.name)
            binding.constant = None

    def _lower_variable_assignment(self, statement: VariableAssignment):
        binding = self.context.bindings.get(statement.name)
        if binding is None:
            raise create_undefined_variable_error(statement.name, statement.location)

        builder = self._builder()
        value = self._lower_expression(statement.value)
        if value.type != binding.type:
            raise create_type_mismatch_error(
                f"assignment to '{statement.name}'", binding.type, value.type, statement.location
            )

        if value.type.is_array:
            for index in range(value.type.length):
                element = builder.load(builder.gep(value.llvm_value, [ll.Constant(I64, index)], inbounds=True))
                target = builder.gep(binding.variable, [ll.Constant(I64, 0), ll.Constant(I64, index)],
                                     inbounds=True)
                builder.store(element, target)
        else:
            builder.store(value.llvm_value, binding.variable)

        if self.context.current_function is None:
            binding.constant = self._try_fold(statement.value)
        else:
            self.context.function_effects[self.context.current_function].add(statement.name)
            binding.constant = None

    def _lower_print(self, statement: Print):
        builder = self._builder()
        value = self._lower_expression(statement.value)

        if value.type.is_array:
            specifier = PRINT_SPECIFIERS[value.type.element]
            arguments = []
            for index in range(value.type.length):
                pointer = builder.gep(value.llvm_value, [ll.Constant(I64, index)], inbounds=True)
                element = Value(ValueType(value.type.element), builder.load(pointer))
                arguments.append(self._printf_argument(element))
            fmt = "[" + ", ".join([specifier] * value.type.length) + "]\n"
        else:
            fmt = PRINT_SPECIFIERS[value.type.kind] + "\n"
            arguments = [self._printf_argument(value)]

        builder.call(self.context.printf, [self._string_pointer(fmt)] + arguments)

    def _printf_argument(self, value: Value):
        # Variadic arguments are promoted: i1 travels as an i32
        if value.type.kind == ValueKind.BOOL:
            return self._builder().zext(value.llvm_value, I32)
        return value.llvm_value

    def _lower_function_call(self, statement: FunctionCall):
        function = self.context.functions.get(statement.name)
        if function is None:
            raise create_undefined_function_error(statement.name, statement.location)

        builder = self._builder()
        arguments = [self._lower_expression(argument) for argument in statement.arguments]

        expected = len(function.args)
        if len(arguments) != expected:
            raise create_arity_error(statement.name, expected, len(arguments), statement.location)

        builder.call(function, [argument.llvm_value for argument in arguments])
        self._apply_call_effects(statement.name)

    def _apply_call_effects(self, name: str):
        """Forget folded values of globals the callee may have stored to."""
        effects = self.context.function_effects[name]
        if self.context.current_function is not None:
            self.context.function_effects[self.context.current_function] |= effects
        for assigned in effects:
            binding = self.context.bindings.get(assigned)
            if binding is not None:
                binding.constant = None

    def _lower_async_function(self, statement: AsyncFunctionDeclaration):
        name = statement.name
        self._check_function_name(name, statement.location)

        function = ll.Function(self.context.module, ll.FunctionType(VOID, []), name=name)
        self.context.functions[name] = function
        self.context.function_effects[name] = set()

        saved = (self.context.builder, self.context.current_function)
        self.context.builder = ll.IRBuilder(function.append_basic_block("entry"))
        self.context.current_function = name

        for inner in statement.body:
            self._lower_statement(inner)
        self.context.builder.ret_void()

        self.context.builder, self.context.current_function = saved

    def _check_global_name(self, name: str, location):
        if name in RESERVED_NAMES:
            raise create_name_conflict_error(name, "the name is reserved", location)
        if name in self.context.functions:
            raise create_name_conflict_error(name, "a function with this name exists", location)

    def _check_function_name(self, name: str, location):
        if name in RESERVED_NAMES:
            raise create_name_conflict_error(name, "the name is reserved", location)
        if name in self.context.functions:
            raise create_name_conflict_error(name, "function is already defined", location)
        if name in self.context.bindings:
            raise create_name_conflict_error(name, "a variable with this name exists", location)

    # ========================================================================
    # Expressions
    # ========================================================================

    def _lower_expression(self, expression: Expression) -> Value:
        """Lower an expression into the current function."""
        if isinstance(expression, NumberLiteral):
            return Value(INT, ll.Constant(I64, expression.value))
        if isinstance(expression, FloatLiteral):
            return Value(FLOAT, ll.Constant(F64, expression.value))
        if isinstance(expression, BooleanLiteral):
            return Value(BOOL, ll.Constant(I1, int(expression.value)))
        if isinstance(expression, StringLiteral):
            return Value(STRING, self._string_pointer(expression.value))
        if isinstance(expression, Identifier):
            return self._lower_identifier(expression)
        if isinstance(expression, BinaryOp):
            return self._lower_binary_op(expression)
        if isinstance(expression, ArrayLiteral):
            return self._lower_array_literal(expression)
        if isinstance(expression, (AsyncWrap, AwaitUnwrap)):
            return self._lower_expression(expression.expression)
        raise create_unsupported_error(f"expression {type(expression).__name__}", expression.location)

    def _lower_identifier(self, expression: Identifier) -> Value:
        binding = self.context.bindings.get(expression.name)
        if binding is None:
            raise create_undefined_variable_error(expression.name, expression.location)

        builder = self._builder()
        if binding.type.is_array:
            zero = ll.Constant(I64, 0)
            return Value(binding.type, builder.gep(binding.variable, [zero, zero], inbounds=True))
        return Value(binding.type, builder.load(binding.variable, name=expression.name))

    def _lower_binary_op(self, expression: BinaryOp) -> Value:
        left = self._lower_expression(expression.left)
        right = self._lower_expression(expression.right)
        self._check_operands(left.type, right.type, expression.location)

        builder = self._builder()
        a, b = left.llvm_value, right.llvm_value
        op = expression.operator

        if left.type.kind == ValueKind.INT:
            if op == BinOp.ADD:
                result = builder.add(a, b, name="addtmp")
            elif op == BinOp.SUBTRACT:
                result = builder.sub(a, b, name="subtmp")
            elif op == BinOp.MULTIPLY:
                result = builder.mul(a, b, name="multmp")
            else:
                if isinstance(b, ll.Constant) and b.constant == 0:
                    raise create_division_by_zero_error(expression.location)
                result = builder.sdiv(a, b, name="divtmp")
        else:
            if op == BinOp.ADD:
                result = builder.fadd(a, b, name="addtmp")
            elif op == BinOp.SUBTRACT:
                result = builder.fsub(a, b, name="subtmp")
            elif op == BinOp.MULTIPLY:
                result = builder.fmul(a, b, name="multmp")
            else:
                result = builder.fdiv(a, b, name="divtmp")

        return Value(left.type, result)

    def _lower_array_literal(self, expression: ArrayLiteral) -> Value:
        elements = [self._lower_expression(element) for element in expression.elements]
        array_type = self._array_type([element.type for element in elements], expression)

        builder = self._builder()
        block = builder.alloca(array_type.llvm_type(), name="array")
        zero = ll.Constant(I64, 0)
        for index, element in enumerate(elements):
            slot = builder.gep(block, [zero, ll.Constant(I64, index)], inbounds=True)
            builder.store(element.llvm_value, slot)

        return Value(array_type, builder.gep(block, [zero, zero], inbounds=True))

    def _check_operands(self, left: ValueType, right: ValueType, location):
        if left != right or not left.is_numeric:
            raise create_operand_error(left, right, location)

    def _array_type(self, element_types: List[ValueType], expression: ArrayLiteral) -> ValueType:
        """Array type of a literal: non-empty, one scalar kind throughout."""
        if not element_types:
            raise create_unsupported_error("empty array literal (element type unknown)", expression.location)

        first = element_types[0]
        for element_type, element in zip(element_types, expression.elements):
            if element_type.is_array:
                raise create_unsupported_error("nested array", element.location)
            if element_type != first:
                raise create_type_mismatch_error("array literal", first, element_type, element.location)
        return array_of(first.kind, len(element_types))

    # ========================================================================
    # Constant folding
    # ========================================================================

    def _fold_initializer(self, name: str, expression: Expression) -> Constant:
        try:
            return self._fold(expression)
        except _NotConstant as e:
            raise create_not_constant_error(name, e.reason, e.location) from None

    def _try_fold(self, expression: Expression) -> Optional[Constant]:
        """Folded value of an already lowered expression, or None if unknown."""
        try:
            return self._fold(expression)
        except (_NotConstant, CodegenError):
            return None

    def _fold(self, expression: Expression) -> Constant:
        """Evaluate an expression at compile time using the binding table."""
        if isinstance(expression, NumberLiteral):
            return Constant(INT, expression.value)
        if isinstance(expression, FloatLiteral):
            return Constant(FLOAT, expression.value)
        if isinstance(expression, BooleanLiteral):
            return Constant(BOOL, expression.value)
        if isinstance(expression, StringLiteral):
            return Constant(STRING, expression.value)

        if isinstance(expression, Identifier):
            binding = self.context.bindings.get(expression.name)
            if binding is None:
                raise create_undefined_variable_error(expression.name, expression.location)
            if binding.constant is None:
                raise _NotConstant(f"'{expression.name}' has no compile-time value", expression.location)
            return binding.constant

        if isinstance(expression, BinaryOp):
            left = self._fold(expression.left)
            right = self._fold(expression.right)
            self._check_operands(left.type, right.type, expression.location)
            try:
                return fold_binary(expression.operator, left, right)
            except ZeroDivisionError:
                raise create_division_by_zero_error(expression.location) from None

        if isinstance(expression, ArrayLiteral):
            elements = tuple(self._fold(element) for element in expression.elements)
            array_type = self._array_type([element.type for element in elements], expression)
            return Constant(array_type, elements)

        if isinstance(expression, (AsyncWrap, AwaitUnwrap)):
            return self._fold(expression.expression)

        raise create_unsupported_error(f"expression {type(expression).__name__}", expression.location)

    def _constant_to_llvm(self, constant: Constant) -> ll.Constant:
        kind = constant.type.kind
        if kind == ValueKind.INT:
            return ll.Constant(I64, constant.value)
        if kind == ValueKind.FLOAT:
            return ll.Constant(F64, constant.value)
        if kind == ValueKind.BOOL:
            return ll.Constant(I1, int(constant.value))
        if kind == ValueKind.STRING:
            return self._string_pointer(constant.value)
        return ll.Constant(constant.type.llvm_type(),
                           [self._constant_to_llvm(element) for element in constant.value])

    # ========================================================================
    # Module helpers
    # ========================================================================

    def _builder(self) -> ll.IRBuilder:
        """Builder for the current function, creating ``main`` on first use."""
        if self.context.builder is not None:
            return self.context.builder

        if self.context.entry_builder is None:
            entry = ll.Function(self.context.module, ll.FunctionType(I32, []), name=ENTRY_FUNCTION)
            self.context.entry_builder = ll.IRBuilder(entry.append_basic_block("entry"))
        return self.context.entry_builder

    def _intern_string(self, text: str) -> ll.GlobalVariable:
        """Private NUL-terminated constant for ``text``, created once per distinct text."""
        variable = self.context.strings.get(text)
        if variable is None:
            data = bytearray(text.encode("utf-8") + b"\0")
            string_type = ll.ArrayType(I8, len(data))

            module = self.context.module
            variable = ll.GlobalVariable(module, string_type, name=module.get_unique_name(".str"))
            variable.linkage = "private"
            variable.global_constant = True
            variable.unnamed_addr = True
            variable.initializer = ll.Constant(string_type, data)
            self.context.strings[text] = variable
        return variable

    def _string_pointer(self, text: str):
        """``i8*`` to the first byte of an interned string."""
        zero = ll.Constant(I32, 0)
        return self._intern_string(text).gep([zero, zero])


class _NotConstant(Exception):
    """Internal signal: an initializer depends on a run-time value."""

    def __init__(self, reason: str, location):
        super().__init__(reason)
        self.reason = reason
        self.location = location


def compile_program(program: Program, config: Optional[CompilerConfig] = None) -> str:
    """Convenience function: lower a program and return the IR text."""
    return CodeGen(config).compile(program)
