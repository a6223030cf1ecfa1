"""Structural rubric checks over a submission's top-level syntax tree."""

from __future__ import annotations

import logging

from jsgrade.checks.base import CheckResult, build_result
from jsgrade.syntax import (
    CallExpression,
    ClassDeclaration,
    ExpressionStatement,
    MemberExpression,
    NewExpression,
    Program,
    VariableDeclaration,
)

CLASS_MISSING = "You must define a class."
OBJECT_MISSING = "You must create an object from the class."
METHOD_NOT_DEFINED = "You must define a method inside the class."
METHOD_NOT_CALLED = "You must call the method from the object."


def check_class_definition(tree: Program, logger: logging.Logger) -> CheckResult:
    """Check that at least one class is declared at the top level."""
    logger.info("Checking if a class is defined")

    classes = tree.classes()
    logger.info(f"Top-level classes: {[c.name for c in classes]}")

    feedback = []
    if not classes:
        feedback.append(CLASS_MISSING)

    return build_result("ClassDefinition", feedback)


def _instantiates(tree: Program, class_name: str) -> bool:
    for node in tree.body:
        match node:
            case VariableDeclaration(declarators=declarators):
                for declarator in declarators:
                    match declarator.init:
                        case NewExpression(callee_name=name) if name == class_name:
                            return True
                        case _:
                            # includes declarators with no initializer
                            continue
    return False


def check_object_instantiation(
    tree: Program, logger: logging.Logger, class_name: str = "Person"
) -> CheckResult:
    """Check that a top-level variable is initialized with ``new <class_name>(...)``."""
    logger.info(f"Checking if an object is instantiated from class '{class_name}'")

    feedback = []
    if not _instantiates(tree, class_name):
        feedback.append(OBJECT_MISSING)

    logger.info(f"Object of '{class_name}' created={not feedback}")
    return build_result("ObjectInstantiation", feedback)


def _calls_method(tree: Program, method_name: str) -> bool:
    for node in tree.body:
        match node:
            case ExpressionStatement(
                expression=CallExpression(callee=MemberExpression(property_name=name))
            ) if name == method_name:
                return True
    return False


def check_class_methods(
    tree: Program,
    logger: logging.Logger,
    class_name: str = "Person",
    method_name: str = "greet",
) -> CheckResult:
    """Check that ``class_name`` defines ``method_name`` and the method is called.

    Both halves are reported separately, so a submission missing both gets
    both messages in one result.
    """
    logger.info(
        f"Checking if method '{method_name}' is defined in '{class_name}' and called"
    )

    target = tree.find_class(class_name)
    defined = isinstance(target, ClassDeclaration) and target.has_method(method_name)
    called = _calls_method(tree, method_name)
    logger.info(f"Method '{method_name}' defined={defined} called={called}")

    feedback = []
    if not defined:
        feedback.append(METHOD_NOT_DEFINED)
    if not called:
        feedback.append(METHOD_NOT_CALLED)

    return build_result("ClassMethods", feedback)
