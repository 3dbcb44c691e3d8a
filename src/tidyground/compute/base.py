"""Base classes and interfaces for the Compute Engine

This module defines the base components that are
necessary to represent a query plan and execute it.
"""

import abc
from typing import Any, Iterator

import pyarrow as pa
import pyarrow.compute as pc


class UnknownColumnError(ValueError):
    """A plan node referenced a column the data doesn't have."""

    def __init__(self, name: str, available: list[str]) -> None:
        self.name = name
        self.available = available
        super().__init__(f"Column {name!r} does not exist, available columns: {available}")


class QueryPlanNode(abc.ABC):
    """A node of a query execution plan.

    The Query plan is represented as a tree
    of nodes. Each node is a step in the execution
    and all previous steps are children of the
    last one.

    For example loading the mammals dataset and keeping
    only the heavy species::

        CSVDataSource -> FilterNode(adult_body_mass_g > 100000)

    That would be a plan where the last step
    is filtering, and the CSVDataSource is a child
    of the filter node.

    Each Node accepts :class:`pyarrow.RecordBatch`
    data as its input and emits a new
    :class:`pyarrow.RecordBatch` as its output.
    Nodes never modify the batches they receive,
    so the same child can feed any number of plans.

    For example a simple node that takes data
    and just forwards it as is after printing
    its content can be implemented as::

        class DebugDataNode(QueryPlanNode):
            def __init__(self, child):
                self.child = child

            def batches(self):
                for b in self.child.batches():
                    print(b)
                    yield b

            def __str__(self):
                return f"DebugDataNode()"
    """

    RecordBatchesGenerator = Iterator[pa.RecordBatch]

    @abc.abstractmethod
    def batches(self) -> RecordBatchesGenerator:
        """Emits the batches for the next node.

        Each QueryPlan node is expected to be able to
        generate data that has to be provided to the next
        node in the plan.

        Usually this happens by consuming data from its
        child nodes, transforming it somehow, and yielding
        it back to the next consumer.
        """
        ...

    @abc.abstractmethod
    def __str__(self) -> str:
        """Human readable representation of the node."""
        ...


class Expression(abc.ABC):
    """Expression to apply to a RecordBatch.

    Expressions are some form of operation that
    has to be applied to the data of a :class:`pyarrow.RecordBatch`
    to create new data.

    Typical example of expressions are: A + B
    which is expected to sum column A of the RecordBatch
    to column B of the RecordBatch and return the result.

    As our engine is Column Major, applying an expression
    always results in a new column, thus in a
    :class:`pyarrow.Array` that contains the data
    for that column, or in a :class:`pyarrow.Scalar`
    for constant expressions.

    Expressions can be combined with the Python operators,
    which build a :class:`FunctionCallExpression` invoking
    the matching :mod:`pyarrow.compute` function:

    >>> from tidyground.compute import col
    >>> print(col("adult_body_mass_g") > 1000)
    pyarrow.compute.greater(ColumnRef(adult_body_mass_g),1000)

    ``==`` and ``!=`` are left to Python, use :meth:`eq` and :meth:`ne`
    to compare data.
    """

    @abc.abstractmethod
    def apply(self, batch: pa.RecordBatch) -> pa.Array:
        """Apply the expression to a RecordBatch.

        Expression classes must implement this method
        to dictate what will happen when an expression
        is applied.
        """
        ...

    @abc.abstractmethod
    def __str__(self) -> str:
        """Human readable representation of the expression."""
        ...

    def __repr__(self) -> str:
        return str(self)

    def _call(self, func: callable, *args: Any) -> "Expression":
        from .expressions import FunctionCallExpression

        return FunctionCallExpression(func, *args)

    def __add__(self, other: Any) -> "Expression":
        return self._call(pc.add, self, other)

    def __radd__(self, other: Any) -> "Expression":
        return self._call(pc.add, other, self)

    def __sub__(self, other: Any) -> "Expression":
        return self._call(pc.subtract, self, other)

    def __rsub__(self, other: Any) -> "Expression":
        return self._call(pc.subtract, other, self)

    def __mul__(self, other: Any) -> "Expression":
        return self._call(pc.multiply, self, other)

    def __rmul__(self, other: Any) -> "Expression":
        return self._call(pc.multiply, other, self)

    def __truediv__(self, other: Any) -> "Expression":
        # Arrow divides integers with an integer result,
        # casting the dividend gives Python's true division.
        return self._call(pc.divide, self._call(pc.cast, self, pa.float64()), other)

    def __rtruediv__(self, other: Any) -> "Expression":
        if not isinstance(other, Expression):
            other = Literal(other)
        return self._call(pc.divide, self._call(pc.cast, other, pa.float64()), self)

    def __neg__(self) -> "Expression":
        return self._call(pc.negate, self)

    def __lt__(self, other: Any) -> "Expression":
        return self._call(pc.less, self, other)

    def __le__(self, other: Any) -> "Expression":
        return self._call(pc.less_equal, self, other)

    def __gt__(self, other: Any) -> "Expression":
        return self._call(pc.greater, self, other)

    def __ge__(self, other: Any) -> "Expression":
        return self._call(pc.greater_equal, self, other)

    def __and__(self, other: Any) -> "Expression":
        return self._call(pc.and_kleene, self, other)

    def __rand__(self, other: Any) -> "Expression":
        return self._call(pc.and_kleene, other, self)

    def __or__(self, other: Any) -> "Expression":
        return self._call(pc.or_kleene, self, other)

    def __ror__(self, other: Any) -> "Expression":
        return self._call(pc.or_kleene, other, self)

    def __invert__(self) -> "Expression":
        return self._call(pc.invert, self)

    def eq(self, other: Any) -> "Expression":
        """Compare for equality, row by row."""
        return self._call(pc.equal, self, other)

    def ne(self, other: Any) -> "Expression":
        """Compare for inequality, row by row."""
        return self._call(pc.not_equal, self, other)

    def is_null(self) -> "Expression":
        """True for the rows where the value is missing."""
        return self._call(pc.is_null, self)

    def is_valid(self) -> "Expression":
        """True for the rows where the value is present."""
        return self._call(pc.is_valid, self)

    def isin(self, values: list[Any]) -> "Expression":
        """True for the rows whose value is one of ``values``."""
        return self._call(pc.is_in, self, pa.array(values))


class ColumnRef(Expression):
    """References a column in a record batch.

    When another expression or the engine need
    to operate on a specific column, we will
    need a way to reference that column and its data.

    This expression is aware of the column and when
    applied to a record batch returns the data for
    that column.
    """

    def __init__(self, name: str) -> None:
        """
        :param name: The name of the column being referenced.
        """
        self.name = name

    def apply(self, batch: pa.RecordBatch) -> pa.Array:
        """Get the data for the column."""
        if self.name not in batch.schema.names:
            raise UnknownColumnError(self.name, batch.schema.names)
        return batch.column(self.name)

    def __str__(self) -> str:
        return f"ColumnRef({self.name})"


class Literal(Expression):
    """A constant value.

    Applying a literal returns the same :class:`pyarrow.Scalar`
    whatever the batch is, compute functions broadcast it
    against the other arguments.
    """

    def __init__(self, value: Any) -> None:
        """
        :param value: The python value of the constant.
        """
        self.value = value

    def apply(self, batch: pa.RecordBatch) -> pa.Scalar:
        return pa.scalar(self.value)

    def __str__(self) -> str:
        return f"Literal({self.value!r})"


col = ColumnRef
lit = Literal
