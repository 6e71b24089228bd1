"""Function stub generation for calls to undeclared names."""
from .exceptions import StubError, ParseFailure, CallSiteNotFound, UnresolvableArgumentType
from .model import CallSite, SingleType, MultiType, ParamCandidate, StubParam
from .locator import locate_call_site
from .resolver import ArgumentResolver, NamingPolicy
from .naming import type_to_arg_name
from .dedupe import ensure_unique_names
from .render import render_stub
from .stub import StubGenerator, generate_function_stub

__all__ = [
    'StubError', 'ParseFailure', 'CallSiteNotFound', 'UnresolvableArgumentType',
    'CallSite', 'SingleType', 'MultiType', 'ParamCandidate', 'StubParam',
    'locate_call_site', 'ArgumentResolver', 'NamingPolicy', 'type_to_arg_name',
    'ensure_unique_names', 'render_stub', 'StubGenerator', 'generate_function_stub',
]
