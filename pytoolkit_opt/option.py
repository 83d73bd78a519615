"""
値を持つか、明示的に空であるかのどちらかを表すコンテナのモジュール。

``None`` や ``0`` や ``""`` といった値そのものと「値が設定されていない」状態を区別する。
"""

from functools import partial
from typing import Any, Generic, TypeVar, get_args

from pydantic import GetCoreSchemaHandler, TypeAdapter, ValidationError
from pydantic_core import core_schema, to_json, to_jsonable_python
from typing_extensions import Self

from .errors import UnmarshalError
from .nullable import NullableColumn

T = TypeVar("T")

EMPTY_STR = "<empty>"
JSON_NULL = b"null"
_JSON_WHITESPACE = b" \t\n\r"


class Option(Generic[T]):
    """
    値を一つ持つか、空であるかのどちらかのコンテナ。

    引数なしで生成した ``Option()`` は空の状態になる。空のとき内部の値は ``None`` で、
    意味のある値として読んではならない。状態を変えられるのは ``put`` と ``clear`` だけ。

    JSON からデコードするには要素の型が必要になる。型は ``Option[int]()`` のように
    生成するか、各コンストラクタの ``type_`` 引数で渡す。``Option[int].empty()`` は
    クラスメソッドを経由するため型が残らないことに注意。

    JSON では空のオプションは ``null`` になり、``null`` は空のオプションになる。
    ``T`` 自体が ``null`` にシリアライズされる場合 (``Option[int | None]`` など)、
    空の状態と値を持つ状態は JSON 上で区別できない。
    """

    def __init__(self, type_: Any = None) -> None:
        self._has_value = False
        self._value: T | None = None
        self._type = type_

    @classmethod
    def of(cls, value: T, type_: Any = None) -> Self:
        option = cls(type_)
        option.put(value)
        return option

    @classmethod
    def empty(cls, type_: Any = None) -> Self:
        return cls(type_)

    @classmethod
    def from_optional(cls, value: T | None, type_: Any = None) -> Self:
        """
        ``T | None`` で省略可能性を表すライブラリとの相互運用用。

        ``None`` なら空のオプションを返す。それ以外は同じオブジェクトを保持する。
        """
        if value is None:
            return cls(type_)
        return cls.of(value, type_)

    @classmethod
    def from_nullable_column(
        cls, column: NullableColumn[T], type_: Any = None
    ) -> Self:
        if column.valid:
            return cls.of(column.v, type_)  # type: ignore[arg-type]
        return cls(type_)

    def has_value(self) -> bool:
        return self._has_value

    def is_empty(self) -> bool:
        return not self._has_value

    @property
    def value(self) -> T | None:
        # Check has_value() before trusting this.
        return self._value

    def get(self) -> tuple[T | None, bool]:
        """
        値と、値が存在するかどうかのフラグを返す。

        フラグが ``False`` のとき、返される値は ``None`` であり使ってはならない。
        """
        return self._value, self._has_value

    def get_or_default(self, default: T) -> T:
        return self._value if self._has_value else default  # type: ignore[return-value]

    def put(self, value: T) -> None:
        self._has_value = True
        self._value = value

    def clear(self) -> None:
        self._has_value = False
        self._value = None

    def to_optional(self) -> T | None:
        """
        空なら ``None`` を、そうでなければ保持しているオブジェクトを返す。

        値自体が ``None`` の場合は空と区別できないため、相互運用の境界でのみ使うこと。
        """
        if self._has_value:
            return self._value
        return None

    def to_nullable_column(self) -> NullableColumn[T]:
        return NullableColumn(valid=self._has_value, v=self._value)

    def marshal_json(self) -> bytes:
        if self._has_value:
            return to_json(self._value)
        return JSON_NULL

    def unmarshal_json(self, data: bytes | str, type_: Any = None) -> None:
        """
        JSON の値を読み込む。

        ``null`` であればオプションを空にする。それ以外は ``T`` としてデコードし、
        成功した場合にのみ値を設定する。失敗した場合、オプションは元の状態のまま。

        Args:
            data: JSON の値
            type_: デコード先の型。省略時は生成時に渡した型、または
                ``Option[int]()`` のように生成した際の型

        Raises:
            UnmarshalError: 型が分からない場合、または ``T`` としてデコードできない場合
        """
        raw = data.encode() if isinstance(data, str) else bytes(data)
        if raw.strip(_JSON_WHITESPACE) == JSON_NULL:
            self.clear()
            return

        if type_ is None:
            type_ = self.element_type()
        if type_ is None:
            raise UnmarshalError(
                data, "element type is unknown, pass type_ or create with Option[T]()"
            )
        try:
            value = TypeAdapter(type_).validate_json(raw)
        except ValidationError as e:
            raise UnmarshalError(data, str(e)) from e
        self.put(value)

    def to_json(self) -> Any:
        if self._has_value:
            return to_jsonable_python(self._value)
        return None

    @classmethod
    def from_json(cls, data: Any, type_: Any) -> Self:
        if data is None:
            return cls(type_)
        try:
            value = TypeAdapter(type_).validate_python(data)
        except ValidationError as e:
            raise UnmarshalError(data, str(e)) from e
        return cls.of(value, type_)

    def element_type(self) -> Any:
        """Return the element type, or ``None`` when it was never given."""
        if self._type is not None:
            return self._type
        args = get_args(getattr(self, "__orig_class__", None))
        return args[0] if args else None

    @classmethod
    def _from_decoded(cls, type_: Any, value: Any) -> "Option[Any]":
        if value is None:
            return cls(type_)
        return cls.of(value, type_)

    @classmethod
    def __get_pydantic_core_schema__(
        cls,
        source_type: Any,
        handler: GetCoreSchemaHandler,
    ) -> core_schema.CoreSchema:
        args = get_args(source_type)
        item_type = args[0] if args else Any
        item_schema = handler.generate_schema(item_type)

        # JSON: null <-> empty. Python: Option instances only, never bare None.
        return core_schema.json_or_python_schema(
            json_schema=core_schema.no_info_after_validator_function(
                partial(cls._from_decoded, item_type),
                core_schema.nullable_schema(item_schema),
            ),
            python_schema=core_schema.is_instance_schema(cls),
            serialization=core_schema.wrap_serializer_function_ser_schema(
                _serialize,
                schema=item_schema,
                info_arg=True,
            ),
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Option):
            return NotImplemented
        return (self._has_value, self._value) == (other._has_value, other._value)

    def __str__(self) -> str:
        if self._has_value:
            return str(self._value)
        return EMPTY_STR

    def __repr__(self) -> str:
        if self._has_value:
            return f"Option.of({self._value!r})"
        return "Option.empty()"


def _serialize(
    option: Option[Any],
    handler: core_schema.SerializerFunctionWrapHandler,
    info: core_schema.SerializationInfo,
) -> Any:
    if not info.mode_is_json():
        return option
    if option.is_empty():
        return None
    return handler(option.value)
