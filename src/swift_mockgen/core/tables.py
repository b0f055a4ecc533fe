from collections.abc import Mapping
from types import MappingProxyType

# Placeholder the parser records for a type it could not resolve
UNKNOWN_TYPE = "Unknown"

ABSENT_VALUE = "nil"
OBSERVABLE_EMPTY = "Observable.empty()"

OPTIONAL_MARKERS = ("?", "!")
REACTIVE_STREAM_PREFIXES = ("Observable<", "RxSwift.Observable<")
COLLECTION_NAMES = ("Array", "Set", "Dictionary")

# Names generated per member of a mock
UNDERLYING_PREFIX = "underlying"
CALL_COUNT_SUFFIX = "CallCount"
SET_CALL_COUNT_SUFFIX = "SetCallCount"
ARG_VALUES_SUFFIX = "ArgValues"
HANDLER_SUFFIX = "Handler"

DEFAULT_VALUES: Mapping[str, str] = MappingProxyType(
    {
        "Int": "0",
        "Int64": "0",
        "Int32": "0",
        "Int16": "0",
        "Int8": "0",
        "UInt": "0",
        "UInt64": "0",
        "UInt32": "0",
        "UInt16": "0",
        "UInt8": "0",
        "Float": "0.0",
        "CGFloat": "0.0",
        "Double": "0.0",
        "Bool": "false",
        "String": '""',
        "Character": '""',
        "TimeInterval": "0.0",
        "NSTimeInterval": "0.0",
        "Date": "Date()",
        "NSDate": "NSDate()",
        "CGRect": ".zero",
        "CGSize": ".zero",
        "CGPoint": ".zero",
        "UIEdgeInsets": ".zero",
        "UIColor": ".white",
        "UIFont": ".systemFont(ofSize: 12)",
        "UIView": "UIView(frame: .zero)",
        "UIViewController": "UIViewController()",
        "UICollectionView": "UICollectionView()",
        "UICollectionViewLayout": "UICollectionViewLayout()",
        "UIScrollView": "UIScrollView()",
        "UIScrollViewKeyboardDismissMode": ".interactive",
        "UIAccessibilityTraits": ".none",
        "Void": "Void",
        "UUID": "UUID()",
    }
)
