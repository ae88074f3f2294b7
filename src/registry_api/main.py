# coding: utf-8

"""
    Crate Registry API

    Publishes crate archives, keeps the crate index in git and tracks owners, versions and downloads.

    The version of the OpenAPI document: 1.0.0
"""  # noqa: E501


from fastapi import FastAPI

from registry_api.apis.owners_api import router as OwnersApiRouter
from registry_api.apis.crates_api import router as CratesApiRouter
from registry_api.apis.users_api import router as UsersApiRouter

app = FastAPI(
    title="Crate Registry API",
    description="Publishes crate archives, keeps the crate index in git and tracks owners, versions and downloads.",
    version="1.0.0",
)

# owners routes must win over GET /api/v1/crates/{name}/{version}
app.include_router(OwnersApiRouter)
app.include_router(CratesApiRouter)
app.include_router(UsersApiRouter)
