"""
Module with constants for CQL type codes.

These constants are the protocol ``[option]`` ids that result metadata uses to
announce a column's type. :mod:`cqlcodec.cqltypes` maps them to codec classes.

Type codes are repeated here from the native protocol specification:

            0x0000    Custom: the value is a [string] naming a server class
            0x0001    Ascii
            0x0002    Bigint
            0x0003    Blob
            0x0004    Boolean
            0x0005    Counter
            0x0006    Decimal
            0x0007    Double
            0x0008    Float
            0x0009    Int
            0x000B    Timestamp
            0x000C    Uuid
            0x000D    Varchar
            0x000E    Varint
            0x000F    Timeuuid
            0x0011    SimpleDateType
            0x0013    ShortType
            0x0014    ByteType

0x000A (Text) only appears in protocol v1 metadata and shares the Varchar
codec. Codes not listed here (inet, time, duration, collections, UDTs,
tuples) have no codec in this package.
"""

CUSTOM_TYPE = 0x0000
AsciiType = 0x0001
LongType = 0x0002
BytesType = 0x0003
BooleanType = 0x0004
CounterColumnType = 0x0005
DecimalType = 0x0006
DoubleType = 0x0007
FloatType = 0x0008
Int32Type = 0x0009
UTF8Type = 0x000A
DateType = 0x000B
UUIDType = 0x000C
VarcharType = 0x000D
IntegerType = 0x000E
TimeUUIDType = 0x000F
SimpleDateType = 0x0011
ShortType = 0x0013
ByteType = 0x0014
