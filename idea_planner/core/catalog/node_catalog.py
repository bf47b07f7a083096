"""Baseline development-task catalog and conditional node injection.

Baseline nodes are authored in dependency order: every node depends only on
nodes listed above it, so the baseline graph is acyclic by construction.
Conditional nodes depend only on baseline ids.
"""
from __future__ import annotations

import logging
from dataclasses import replace
from typing import Iterable

from idea_planner.core.errors import IntegrityError
from idea_planner.core.model import FeatureTags, PlanNode

logger = logging.getLogger(__name__)


BASELINE_NODES: tuple[PlanNode, ...] = (
    PlanNode(
        id="system-architecture",
        title="System Architecture Design",
        description="Design scalable and maintainable system architecture with proper separation of concerns",
        category="architecture",
        priority="critical",
        estimated_time="2-3 days",
        complexity="complex",
        dependencies=(),
        tools=("Draw.io", "Lucidchart", "Figma", "Architecture Decision Records"),
        prompts=(
            "Design a scalable microservices architecture for a {idea} application",
            "Create a system design diagram showing data flow and component interactions for {idea}",
            "Define the core modules of {idea} and their responsibilities",
        ),
        resources=(
            "https://martinfowler.com/articles/microservices.html",
            "https://aws.amazon.com/architecture/",
            "https://learn.microsoft.com/en-us/azure/architecture/",
        ),
    ),
    PlanNode(
        id="database-schema",
        title="Database Schema Design",
        description="Design an efficient database schema with proper relationships and indexing",
        category="database",
        priority="critical",
        estimated_time="1-2 days",
        complexity="moderate",
        dependencies=("system-architecture",),
        tools=("dbdiagram.io", "MySQL Workbench", "PostgreSQL", "MongoDB Compass"),
        prompts=(
            "Design a normalized database schema for {idea} with proper relationships",
            "Create ERD diagrams for {idea} showing entity relationships and cardinality",
            "Define indexes and constraints for optimal query performance in {idea}",
        ),
        resources=(
            "https://www.postgresql.org/docs/current/ddl.html",
            "https://www.mongodb.com/docs/manual/data-modeling/",
        ),
    ),
    PlanNode(
        id="ui-design",
        title="User Interface Design",
        description="Create intuitive and responsive user interfaces with modern design principles",
        category="ui",
        priority="high",
        estimated_time="3-5 days",
        complexity="moderate",
        dependencies=("system-architecture",),
        tools=("Figma", "Adobe XD", "Sketch", "InVision"),
        prompts=(
            "Design a modern, responsive UI for {idea} following Material Design principles",
            "Create user flow diagrams showing the complete user journey through {idea}",
            "Design mobile-first responsive layouts for {idea} with accessibility in mind",
        ),
        resources=(
            "https://m3.material.io/",
            "https://www.figma.com/community",
            "https://www.w3.org/WAI/WCAG21/quickref/",
        ),
    ),
    PlanNode(
        id="component-library",
        title="Component Library",
        description="Build reusable UI components for consistent design and faster development",
        category="ui",
        priority="high",
        estimated_time="2-3 days",
        complexity="moderate",
        dependencies=("ui-design",),
        tools=("Storybook", "Styled Components", "Tailwind CSS", "Material-UI", "Ant Design"),
        prompts=(
            "Create a component library for {idea} with consistent styling",
            "Design an atomic design system for {idea} with atoms, molecules and organisms",
            "Build interactive component documentation for {idea} with Storybook",
        ),
        resources=(
            "https://storybook.js.org/",
            "https://bradfrost.com/blog/post/atomic-web-design/",
            "https://tailwindcss.com/docs",
        ),
    ),
    PlanNode(
        id="api-development",
        title="API Development",
        description="Build robust RESTful APIs with proper authentication and documentation",
        category="backend",
        priority="critical",
        estimated_time="4-6 days",
        complexity="complex",
        dependencies=("system-architecture", "database-schema"),
        tools=("Node.js", "Express", "FastAPI", "Django", "Postman", "Swagger"),
        prompts=(
            "Design RESTful API endpoints for {idea} with proper HTTP methods and status codes",
            "Implement JWT authentication for {idea} with refresh tokens and role-based access control",
            "Create OpenAPI documentation for the {idea} API",
        ),
        resources=(
            "https://restfulapi.net/",
            "https://jwt.io/",
            "https://swagger.io/docs/",
        ),
    ),
    PlanNode(
        id="business-logic",
        title="Business Logic Implementation",
        description="Implement core business logic with proper error handling and validation",
        category="backend",
        priority="high",
        estimated_time="3-5 days",
        complexity="moderate",
        dependencies=("api-development",),
        tools=("TypeScript", "Jest", "ESLint", "Prettier", "Joi"),
        prompts=(
            "Implement core business logic for {idea} with proper input validation",
            "Create error handling for {idea} with meaningful error messages",
            "Write unit tests for all business logic functions of {idea}",
        ),
        resources=(
            "https://jestjs.io/docs/getting-started",
            "https://joi.dev/api/",
        ),
    ),
    PlanNode(
        id="security-hardening",
        title="Security Implementation",
        description="Implement security measures such as rate limiting, input validation and secure headers",
        category="security",
        priority="critical",
        estimated_time="2-3 days",
        complexity="complex",
        dependencies=("api-development",),
        tools=("Helmet.js", "bcrypt", "rate-limiter", "CORS", "OWASP ZAP"),
        prompts=(
            "Implement security measures for {idea} following OWASP guidelines",
            "Set up rate limiting, input validation and SQL injection prevention for {idea}",
            "Configure CORS, CSP headers and HTTPS for {idea}",
        ),
        resources=(
            "https://owasp.org/www-project-top-ten/",
            "https://helmetjs.github.io/",
            "https://cheatsheetseries.owasp.org/",
        ),
    ),
    PlanNode(
        id="testing-strategy",
        title="Testing Strategy",
        description="Implement a testing strategy with unit, integration and end-to-end tests",
        category="testing",
        priority="high",
        estimated_time="3-4 days",
        complexity="moderate",
        dependencies=("business-logic", "component-library"),
        tools=("Jest", "Cypress", "Playwright", "Postman", "Supertest"),
        prompts=(
            "Create a testing strategy for {idea} with unit, integration and E2E tests",
            "Set up an automated testing pipeline for {idea} with CI integration",
            "Apply test-driven development to the critical features of {idea}",
        ),
        resources=(
            "https://jestjs.io/",
            "https://www.cypress.io/",
            "https://playwright.dev/",
        ),
    ),
    PlanNode(
        id="deployment-pipeline",
        title="Deployment Setup",
        description="Set up an automated deployment pipeline with proper environment management",
        category="deployment",
        priority="high",
        estimated_time="2-3 days",
        complexity="moderate",
        dependencies=("testing-strategy",),
        tools=("Docker", "GitHub Actions", "AWS", "Vercel", "Kubernetes"),
        prompts=(
            "Set up an automated deployment pipeline for {idea} with Docker and CI/CD",
            "Configure environment variables and secrets management for {idea}",
            "Implement a blue-green deployment strategy for {idea}",
        ),
        resources=(
            "https://docs.docker.com/",
            "https://docs.github.com/en/actions",
            "https://kubernetes.io/docs/",
        ),
    ),
)


# (tag, node) pairs, injected in this order when the tag is set.
CONDITIONAL_NODES: tuple[tuple[str, PlanNode], ...] = (
    (
        "is_ai",
        PlanNode(
            id="ai-ml-integration",
            title="AI/ML Integration",
            description="Integrate AI/ML capabilities with proper model management and monitoring",
            category="backend",
            priority="critical",
            estimated_time="5-7 days",
            complexity="complex",
            dependencies=("api-development",),
            tools=("TensorFlow", "PyTorch", "OpenAI API", "Hugging Face", "MLflow"),
            prompts=(
                "Design an AI/ML architecture for {idea} with training and inference pipelines",
                "Implement model versioning and A/B testing for the models behind {idea}",
                "Set up monitoring and alerting for model performance and drift in {idea}",
            ),
            resources=(
                "https://www.tensorflow.org/",
                "https://pytorch.org/",
                "https://mlflow.org/",
            ),
        ),
    ),
    (
        "is_mobile_app",
        PlanNode(
            id="mobile-app-development",
            title="Mobile App Development",
            description="Build a native or cross-platform mobile application",
            category="ui",
            priority="critical",
            estimated_time="4-6 days",
            complexity="complex",
            dependencies=("ui-design",),
            tools=("React Native", "Flutter", "Xcode", "Android Studio", "Expo"),
            prompts=(
                "Design a mobile app architecture for {idea} with offline-first capabilities",
                "Implement push notifications and deep linking for the {idea} mobile app",
                "Create a mobile UI for {idea} with platform-specific design patterns",
            ),
            resources=(
                "https://reactnative.dev/",
                "https://flutter.dev/",
                "https://expo.dev/",
            ),
        ),
    ),
)


def build_nodes(tags: FeatureTags) -> list[PlanNode]:
    """Return the node list for one run: baseline nodes, then injected ones."""

    nodes = list(BASELINE_NODES)
    existing_ids = {n.id for n in nodes}

    for tag, template in CONDITIONAL_NODES:
        if not getattr(tags, tag):
            continue
        node_id = _unique_id(template.id, existing_ids)
        existing_ids.add(node_id)
        nodes.append(template if node_id == template.id else replace(template, id=node_id))
        logger.debug("injected node %s for tag %s", node_id, tag)

    return nodes


def check_integrity(nodes: Iterable[PlanNode]) -> None:
    """Raise IntegrityError on duplicate ids, repeated dependencies, or dependencies outside the node set."""

    node_list = list(nodes)
    seen: set[str] = set()
    for i, n in enumerate(node_list):
        if n.id in seen:
            raise IntegrityError(
                code="E_DUPLICATE_ID",
                message=f"duplicate node id: {n.id}",
                path=f"nodes[{i}].id",
            )
        seen.add(n.id)

    for i, n in enumerate(node_list):
        listed: set[str] = set()
        for di, dep in enumerate(n.dependencies):
            if dep in listed:
                raise IntegrityError(
                    code="E_DUPLICATE_DEPENDENCY",
                    message=f"{n.id} lists dependency {dep} more than once",
                    path=f"nodes[{i}].dependencies[{di}]",
                )
            listed.add(dep)
            if dep not in seen:
                raise IntegrityError(
                    code="E_UNKNOWN_DEPENDENCY",
                    message=f"{n.id} depends on unknown id: {dep}",
                    path=f"nodes[{i}].dependencies[{di}]",
                )


def _unique_id(base: str, existing: set[str]) -> str:
    if base not in existing:
        return base
    for ch in "ABCDEFGHIJKLMNOPQRSTUVWXYZ":
        candidate = f"{base}-{ch}"
        if candidate not in existing:
            return candidate
    raise IntegrityError(code="E_DUPLICATE_ID", message=f"could not allocate unique id for base={base}")
