"""Authentication Boundary — bearer token verification and principal extraction.

Usage:
    from mutual_aid.auth.dependencies import get_current_principal

    @router.get("/protected")
    async def protected(principal: Principal = Depends(get_current_principal)):
        return {"user_id": principal.user_id}
"""
