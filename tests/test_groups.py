"""Test route groups, prefixes and middleware scoping."""

from http_router import PendingRoutes, RouteRegistrar, Router, Scope


def test_group_applies_prefix_to_routes(router):
    """Prefix every route of the group."""

    def routes(r):
        r.get("/users", ("Controller", "users"))
        r.get("/posts", ("Controller", "posts"))

    router.prefix("admin").group(routes)

    assert router.has_route("GET", "/admin/users")
    assert router.has_route("GET", "/admin/posts")
    assert not router.has_route("GET", "/users")


def test_group_applies_middleware_to_routes(router):
    """Attach middleware to every route of the group."""
    router.middleware("AuthMiddleware").group(
        lambda r: r.get("/users", ("Controller", "users"))
    )
    assert router.get_routes()[0].middleware == ("AuthMiddleware",)


def test_group_applies_prefix_and_middleware_together(router):
    """Prefix and middleware combine."""
    router.prefix("admin").middleware("AuthMiddleware").group(
        lambda r: r.get("/users", ("Controller", "users"))
    )
    assert router.has_route("GET", "/admin/users")
    assert router.get_routes()[0].middleware == ("AuthMiddleware",)


def test_nested_groups_stack_prefixes(router):
    """Inner prefixes follow outer ones."""
    router.prefix("api").group(
        lambda r: r.prefix("v1").group(
            lambda r: r.get("/users", ("Controller", "users"))
        )
    )
    assert router.has_route("GET", "/api/v1/users")


def test_nested_groups_stack_middleware(router):
    """Inner middleware follows outer middleware."""
    router.middleware("Middleware1").group(
        lambda r: r.middleware("Middleware2").group(
            lambda r: r.get("/users", ("Controller", "users")).middleware("Local")
        )
    )
    assert router.get_routes()[0].middleware == ("Middleware1", "Middleware2", "Local")


def test_nested_group_siblings(router):
    """Sibling groups do not share their frames."""

    def api(r):
        r.prefix("v1").middleware("V1").group(
            lambda r: r.get("/users", ("V1", "users"))
        )
        r.get("/status", ("Api", "status"))
        r.prefix("v2").middleware("V2").group(
            lambda r: r.get("/users", ("V2", "users"))
        )

    router.prefix("api").middleware("Api").group(api)

    routes = [(r.pattern, r.middleware) for r in router.get_routes()]
    assert routes == [
        ("/api/v1/users", ("Api", "V1")),
        ("/api/status", ("Api",)),
        ("/api/v2/users", ("Api", "V2")),
    ]


def test_group_with_multiple_middleware(router):
    """Accept a list of middleware, keeping order and duplicates."""
    router.middleware(["Middleware1", "Middleware2"]).middleware("Middleware1").group(
        lambda r: r.get("/users", ("Controller", "users"))
    )
    assert router.get_routes()[0].middleware == (
        "Middleware1",
        "Middleware2",
        "Middleware1",
    )


def test_empty_group_works(router):
    """A group without routes registers nothing."""
    router.prefix("admin").group(lambda r: None)
    assert len(router.get_routes()) == 0


def test_group_with_resource_routes(router):
    """Resources inside groups get the group prefix."""
    router.prefix("api").group(
        lambda r: r.resource("users", "UserController", only=["index", "show"])
    )
    assert router.has_route("GET", "/api/users")
    assert router.has_route("GET", "/api/users/{id}")
    assert router.route("users.show", {"id": 5}) == "/api/users/5"


def test_group_preserves_route_names(router):
    """Names given inside a group are kept as is."""
    router.prefix("admin").group(
        lambda r: r.get("/users", ("Controller", "users")).name("admin.users")
    )
    assert router.get_routes()[0].name == "admin.users"


def test_routes_outside_group_not_affected(funct):
    """Routes before and after a group keep their own pattern."""
    router = (
        Router.create(configure_logs=False)
        .get("/home", ("Controller", "home"))
        .prefix("admin")
        .group(lambda r: r.get("/users", ("Controller", "users")))
        .get("/about", ("Controller", "about"))
    )

    assert router.has_route("GET", "/home")
    assert router.has_route("GET", "/admin/users")
    assert router.has_route("GET", "/about")
    assert not router.has_route("GET", "/admin/about")


def test_group_strips_leading_trailing_slashes_from_prefix(router):
    """Slashes around prefixes are ignored."""
    router.prefix("/admin/").group(
        lambda r: r.prefix("//reports/").group(
            lambda r: r.get("/daily/", ("Controller", "daily"))
        )
    )
    assert router.get_routes()[0].pattern == "/admin/reports/daily"


def test_group_root_route(router):
    """The root route of a group is the prefix itself."""
    router.prefix("admin").group(lambda r: r.get("/", ("Controller", "dashboard")))
    assert router.get_routes()[0].pattern == "/admin"
    assert router.match("GET", "/admin/") is not None


def test_middleware_not_applied_to_routes_between_groups(router):
    """Middleware set for a group never reaches the route registered before it."""
    router.middleware(["ApplicationAuthMiddleware"]).group(
        lambda r: r.get("/", ("IndexController", "index"))
    )

    router.get("/oauth2callback", ("ApplicationOauth2CallbackController", "callback"))
    router.get("/logout", ("ApplicationLogoutController", "logout"))

    router.middleware(["CentralizedAuthMiddleware"]).group(
        lambda r: r.get("/checkout", ("CheckoutController", "checkout"))
    )

    routes = router.get_routes()

    assert routes[0].pattern == "/"
    assert routes[0].middleware == ("ApplicationAuthMiddleware",)

    assert routes[1].pattern == "/oauth2callback"
    assert routes[1].middleware == ()

    assert routes[2].pattern == "/logout"
    assert routes[2].middleware == ()

    assert routes[3].pattern == "/checkout"
    assert routes[3].middleware == ("CentralizedAuthMiddleware",)


def test_multiple_middleware_group_chains_work_correctly(router):
    """Sequential groups each keep their middleware to themselves."""
    router.middleware("M1").group(lambda r: r.get("/group1", ("Controller1", "index")))
    router.get("/between1", ("BetweenController1", "index"))
    router.middleware("M2").group(lambda r: r.get("/group2", ("Controller2", "index")))
    router.get("/between2", ("BetweenController2", "index"))
    router.middleware("M3").group(lambda r: r.get("/group3", ("Controller3", "index")))

    routes = [(r.pattern, r.middleware) for r in router.get_routes()]
    assert routes == [
        ("/group1", ("M1",)),
        ("/between1", ()),
        ("/group2", ("M2",)),
        ("/between2", ()),
        ("/group3", ("M3",)),
    ]


def test_pending_attributes_apply_to_next_route_only(router):
    """Without group, pending attributes are consumed by one route."""
    router.get("/before", ("Controller", "before"))
    pending = router.prefix("admin").middleware("Auth")
    builder = pending.get("/users", ("Controller", "users"))
    builder.get("/after", ("Controller", "after"))
    router.get("/later", ("Controller", "later"))

    routes = [(r.pattern, r.middleware) for r in router.get_routes()]
    assert routes == [
        ("/before", ()),
        ("/admin/users", ("Auth",)),
        ("/after", ()),
        ("/later", ()),
    ]


def test_unused_pending_attributes_are_discarded(router):
    """Pending attributes never used leave no trace."""
    router.prefix("admin").middleware("Auth")
    router.get("/users", ("Controller", "users"))
    route = router.get_routes()[0]
    assert route.pattern == "/users"
    assert route.middleware == ()


def test_pending_routes_are_values(router):
    """Prefix and middleware return new objects and leave the router alone."""
    pending = router.prefix("admin")
    assert isinstance(pending, PendingRoutes)
    assert router.scope == Scope()
    assert pending.scope == Scope("admin")
    assert pending.middleware("Auth").scope == Scope("admin", ("Auth",))
    assert pending.scope == Scope("admin")


def test_group_callback_receives_scoped_registrar(router):
    """The callback gets a registrar bound to the group frame."""
    seen = []
    router.prefix("api").middleware("Api").group(seen.append)

    assert len(seen) == 1
    assert isinstance(seen[0], RouteRegistrar)
    assert seen[0].router is router
    assert seen[0].scope == Scope("api", ("Api",))


def test_group_returns_router(router):
    """Group chains back to the registrar that started it."""
    assert router.prefix("admin").group(lambda r: None) is router
    assert router.group(lambda r: None) is router


def test_plain_group_keeps_scope(router):
    """A group without pending attributes uses the current frame."""
    router.prefix("api").group(
        lambda r: r.group(lambda inner: inner.get("/users", ("Controller", "users")))
    )
    assert router.get_routes()[0].pattern == "/api/users"


def test_scenario_prefix_then_sibling(router):
    """A route registered right after a prefixed group has no prefix."""
    router.prefix("admin").group(lambda r: r.get("/users", ("Controller", "users")))
    router.get("/users", ("Controller", "public"))
    assert router.has_route("GET", "/admin/users")
    assert router.get_routes()[1].pattern == "/users"


def test_scenario_middleware_groups_and_route_between(router):
    """R1 gets M1, R2 nothing, R3 gets M2."""
    router.middleware("M1").group(lambda r: r.get("/r1", ("C", "r1")))
    router.get("/r2", ("C", "r2"))
    router.middleware("M2").group(lambda r: r.get("/r3", ("C", "r3")))

    r1, r2, r3 = router.get_routes()
    assert r1.middleware == ("M1",)
    assert r2.middleware == ()
    assert r3.middleware == ("M2",)


def test_group_registrar_resolves_routes(router):
    """Registrars handed to a group callback resolve routes too."""
    seen = []

    def routes(r):
        builder = r.get("/users/{id}", ("Controller", "show")).name("admin.users")
        seen.append(builder.route("admin.users", id=1))
        seen.append(r.match("GET", "/admin/users/1").route.name)
        seen.append(r.has_route("GET", "/admin/users/{id}"))
        seen.append(len(r.get_routes()))
        seen.append(r.is_cacheable())
        seen.append(r.compile()["routes"][0]["pattern"])

    router.prefix("admin").group(routes)

    assert seen == [
        "/admin/users/1",
        "admin.users",
        True,
        1,
        True,
        "/admin/users/{id}",
    ]
