"""Per application type deployment profiles"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..constants import ApplicationType


@dataclass(frozen=True)
class AppProfile:
    """Everything that varies by application type

    Attributes:
        app_type: Application type this profile describes
        label: Human readable stack name
        base_dependencies: Dependency name to config options, installed on
            every deployment of this type
        environment: Type-specific environment variables
        extra_port: Additional firewall port, if the app listens on one
        health_marker: Text the health check expects on the home page;
            None means the application name is used
        verify_endpoints: Paths checked after deployment
        summary_lines: Markdown lines for the workflow summary job
    """

    app_type: ApplicationType
    label: str
    base_dependencies: Dict[str, Dict[str, Any]]
    environment: Dict[str, str] = field(default_factory=dict)
    extra_port: Optional[str] = None
    health_marker: Optional[str] = None
    verify_endpoints: List[str] = field(default_factory=lambda: ["/"])
    summary_lines: List[str] = field(default_factory=list)

    @property
    def uses_docker(self) -> bool:
        return self.app_type == ApplicationType.DOCKER


PROFILES: Dict[ApplicationType, AppProfile] = {
    ApplicationType.LAMP: AppProfile(
        app_type=ApplicationType.LAMP,
        label="LAMP Stack",
        base_dependencies={
            "apache": {
                "enable_rewrite": True,
                "document_root": "/var/www/html",
            },
            "php": {
                "version": "8.1",
                "extensions": ["curl", "json", "mbstring", "mysql", "xml", "zip"],
            },
        },
        environment={"APACHE_DOCUMENT_ROOT": "/var/www/html"},
        extra_port="8080",  # phpMyAdmin
        health_marker="LAMP Stack",
        verify_endpoints=["/", "/api/test.php"],
        summary_lines=[
            "### 🔧 LAMP Stack",
            "- **Linux**: Ubuntu 22.04",
            "- **Apache**: Web Server",
            "- **MySQL**: Database",
            "- **PHP**: Application Runtime",
        ],
    ),
    ApplicationType.NODEJS: AppProfile(
        app_type=ApplicationType.NODEJS,
        label="Node.js",
        base_dependencies={
            "nodejs": {
                "version": "18",
                "package_manager": "npm",
            },
            "pm2": {
                "instances": 1,
                "exec_mode": "cluster",
            },
        },
        environment={"NODE_ENV": "production", "PORT": "3000"},
        extra_port="3000",
        health_marker="Node.js",
        verify_endpoints=["/", "/api/health"],
        summary_lines=[
            "### 📡 Endpoints",
            "- **Home**: ${{ needs.deploy.outputs.deployment_url }}",
            "- **Health**: ${{ needs.deploy.outputs.deployment_url }}api/health",
            "- **Info**: ${{ needs.deploy.outputs.deployment_url }}api/info",
        ],
    ),
    ApplicationType.PYTHON: AppProfile(
        app_type=ApplicationType.PYTHON,
        label="Python (Flask)",
        base_dependencies={
            "python": {
                "version": "3.9",
                "pip_packages": ["flask", "gunicorn"],
            },
            "gunicorn": {
                "app_module": "app:app",
                "workers": 2,
                "bind": "0.0.0.0:5000",
            },
        },
        environment={"FLASK_ENV": "production", "FLASK_APP": "app.py", "PORT": "5000"},
        extra_port="5000",
        health_marker="Flask",
        verify_endpoints=["/", "/api/health"],
        summary_lines=[
            "### 🐍 Flask API",
            "- **Home**: ${{ needs.deploy.outputs.deployment_url }}",
            "- **Health**: ${{ needs.deploy.outputs.deployment_url }}api/health",
            "- **API**: ${{ needs.deploy.outputs.deployment_url }}api/",
        ],
    ),
    ApplicationType.REACT: AppProfile(
        app_type=ApplicationType.REACT,
        label="React",
        base_dependencies={
            "nodejs": {
                "version": "18",
                "package_manager": "npm",
                "build_command": "npm run build",
            },
            "nginx": {
                "document_root": "/var/www/html",
                "enable_gzip": True,
                "spa_fallback": True,
            },
        },
        environment={"REACT_APP_ENV": "production", "BUILD_PATH": "build"},
        health_marker="React",
        summary_lines=[
            "### ⚛️ React Dashboard",
            "- **Dashboard**: ${{ needs.deploy.outputs.deployment_url }}",
            "- **Build**: Production optimized",
        ],
    ),
    ApplicationType.NGINX: AppProfile(
        app_type=ApplicationType.NGINX,
        label="Static Site (Nginx)",
        base_dependencies={
            "nginx": {
                "document_root": "/var/www/html",
                "enable_gzip": True,
                "client_max_body_size": "10M",
            },
        },
        environment={"NGINX_DOCUMENT_ROOT": "/var/www/html"},
        summary_lines=[
            "### 🌐 Static Site",
            "- **Server**: Nginx",
            "- **Content**: Static files",
        ],
    ),
    ApplicationType.DOCKER: AppProfile(
        app_type=ApplicationType.DOCKER,
        label="Docker",
        base_dependencies={
            "docker": {
                "install_compose": True,
            },
        },
        environment={"DOCKER_BUILDKIT": "1"},
        health_marker="Docker",
        summary_lines=[
            "### 🐳 Docker Application",
            "- **Containers**: Multi-container setup",
            "- **Compose**: Docker Compose orchestration",
        ],
    ),
}


def get_profile(app_type: ApplicationType) -> Optional[AppProfile]:
    """Look up the profile for an application type"""
    return PROFILES.get(app_type)
