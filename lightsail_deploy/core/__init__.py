"""Core functionality for lightsail-deploy"""

from .app_profiles import AppProfile, PROFILES, get_profile
from .app_scaffold import AppScaffold, render_app
from .request_parser import RequestParser, parse_request, is_automated, request_from_environment
from .dependency_resolver import DependencyResolver
from .descriptor_builder import DescriptorBuilder
from .emitter import DescriptorEmitter
from .validation_engine import ValidationEngine, ValidationResult
from .workflow_generator import WorkflowGenerator
from .trust_policy import build_trust_policy, trust_condition, role_arn

__all__ = [
    "AppProfile",
    "PROFILES",
    "get_profile",
    "AppScaffold",
    "render_app",
    "RequestParser",
    "parse_request",
    "is_automated",
    "request_from_environment",
    "DependencyResolver",
    "DescriptorBuilder",
    "DescriptorEmitter",
    "ValidationEngine",
    "ValidationResult",
    "WorkflowGenerator",
    "build_trust_policy",
    "trust_condition",
    "role_arn",
]
