"""
CI functions for a Laravel application.

Run inside an engine session:

    modrun entrypoint

or inspect offline from this directory:

    modrun functions
    modrun schema
"""

from typing import Annotated

from modrun import Argument, Container, Directory, Service, function, module_object

PHP_IMAGE = "php:8.3-cli-alpine"


@module_object
class LaravelApp:
    @function("Build the application container")
    def build(self, source: Annotated[Directory, Argument("The source code directory")]) -> Container:
        return (
            self.client.container()
            .from_(PHP_IMAGE)
            .with_mounted_directory("/app", source)
            .with_workdir("/app")
            .with_exec(["composer", "install", "--no-interaction"])
        )

    @function("Run parallel-lint over the source tree")
    def lint(self, source: Annotated[Directory, Argument("The source code directory")]) -> str:
        return (
            self.client.container()
            .from_("jakzal/phpqa:latest")
            .with_mounted_directory("/tmp/app", source)
            .with_exec(["parallel-lint", "/tmp/app"])
            .stdout()
        )

    @function("Run the test suite against a MariaDB service")
    def test(
        self,
        source: Annotated[Directory, Argument("The source code directory")],
        only: Annotated[str, Argument("PHPUnit --filter expression")] = "",
    ) -> str:
        args = ["./vendor/bin/phpunit", "--testdox"]
        if only:
            args += ["--filter", only]
        return (
            self.build(source)
            .with_env_variable("DB_HOST", "database")
            .with_service_binding("database", self.database())
            .with_exec(["php", "artisan", "migrate", "--force"])
            .with_exec(args)
            .stdout()
        )

    @function("Open a shell in the application container")
    def shell(self, source: Annotated[Directory, Argument("The source code directory")]) -> Container:
        return self.build(source).with_exec(["sh"])

    def database(self) -> Service:
        return (
            self.client.container()
            .from_("mariadb:11")
            .with_env_variable("MARIADB_ALLOW_EMPTY_ROOT_PASSWORD", "1")
            .with_env_variable("MARIADB_DATABASE", "testing")
            .with_exposed_port(3306)
            .as_service()
        )
