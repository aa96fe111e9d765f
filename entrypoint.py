import asyncio
import sys

from repostructure.app import RepositoryStructure
from repostructure.libs.config import Config, ConfigModule
from repostructure.libs.exceptions import ConfigError, NoApiTokenError
from repostructure.libs.graphql.graphql_client import GraphQLError


def main() -> int:
    try:
        config = ConfigModule.for_root().get(Config)
    except ConfigError as ex:
        print(f"❌ FATAL: {ex}", file=sys.stderr)
        return 1

    try:
        asyncio.run(RepositoryStructure(config=config).sync())
    except (GraphQLError, NoApiTokenError, ConfigError) as ex:
        print(f"❌ FATAL: {ex}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
