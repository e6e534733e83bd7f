from __future__ import annotations

import inspect
import logging
import pkgutil
from collections.abc import Callable, Iterable
from typing import Any, ClassVar, TypeVar, overload

from typing_extensions import Self

from keywire._internal.autowire import Autowirer
from keywire._internal.bindings import (
    Binding,
    BindingKey,
    BindingRegistry,
    FactoryBinding,
    InstanceConcrete,
    LiteralConcrete,
    Producer,
    ProducerConcrete,
    TypeConcrete,
    classify_concrete,
    ensure_callable,
)
from keywire._internal.integrations.pydantic_settings import is_pydantic_settings_subclass
from keywire._internal.lifecycle import LifecycleCache
from keywire._internal.parameters import ParameterInspector
from keywire._internal.resolution_stack import ResolutionStack
from keywire.exceptions import (
    KeyWireClassNotFoundError,
    KeyWireInvalidRegistrationError,
    KeyWireMethodNotFoundError,
    KeyWireUnresolvedBindingError,
)
from keywire.method_injection import MethodInjection
from keywire.service_provider import ServiceProvider

T = TypeVar("T")

logger = logging.getLogger(__name__)

_CallArgs = tuple[tuple[Any, ...], dict[str, Any]]


class ContextualBindingBuilder:
    """Collect "when ``consumer`` needs ``abstract`` give ``implementation``" rules.

    Returned by ``Container.when``. The consumer is captured at construction,
    so builders for different consumers never interfere.
    """

    def __init__(self, container: Container, consumer: BindingKey) -> None:
        self._container = container
        self._consumer = consumer

    @property
    def consumer(self) -> BindingKey:
        return self._consumer

    def needs(self, abstract: BindingKey, implementation: Any) -> Self:
        """Give ``implementation`` to the consumer whenever it depends on ``abstract``.

        Args:
            abstract: Key the consumer's parameter resolves to.
            implementation: Class to build, or another key to resolve.

        """
        self._container._add_contextual_binding(  # noqa: SLF001
            self._consumer,
            abstract,
            implementation,
        )
        return self


class Container:
    """Map keys to producers and resolve object graphs.

    Keys are any hashable value, usually strings or classes. ``make`` walks a
    fixed precedence chain after resolving aliases: literal bindings,
    contextual bindings, already resolved shared instances, custom resolvers,
    closures, regular bindings, the delegate container and finally
    autowiring. ``factory`` walks the same chain without the literal and
    contextual steps and with factory bindings checked before regular ones.

    Autowiring inspects constructor parameters and resolves each by its
    declared type, falling back to its default value and then to ``None``.
    ``ReflectionContainer`` replaces that last fallback with an error.

    The container is meant to be configured and used from a single thread.
    """

    _strict_parameters: ClassVar[bool] = False

    def __init__(
        self,
        *,
        autowire: bool = True,
        method_injection: MethodInjection = MethodInjection.MARKED,
    ) -> None:
        """Initialize an empty container.

        Args:
            autowire: Build unbound classes by inspecting their constructors.
            method_injection: Which methods to call with resolved parameters
                right after construction.

        """
        self._registry = BindingRegistry()
        self._cache = LifecycleCache()
        self._stack = ResolutionStack()
        self._autowire = autowire
        self._delegate: Container | None = None
        self._service_providers: list[ServiceProvider] = []
        self._booted_providers = 0
        self._booted = False
        self._autowirer = Autowirer(
            container=self,
            registry=self._registry,
            inspector=ParameterInspector(),
            method_injection=method_injection,
            strict=self._strict_parameters,
        )

    # Registration

    def bind(self, key: BindingKey, concrete: Any = None, *, shared: bool = False) -> None:
        """Register a binding for ``key``.

        The kind of binding follows from ``concrete``: a class is autowired,
        a non-class callable is a closure called with the container, a string
        or number is a literal returned verbatim, any other object is returned
        as is. Omit ``concrete`` to bind a class to itself. Re-binding a key
        replaces the previous binding.

        Args:
            key: Key to register.
            concrete: Class, closure, literal value or instance.
            shared: Cache the first resolved instance for the container's lifetime.

        Raises:
            KeyWireInvalidRegistrationError: If ``concrete`` is omitted and
                ``key`` is not a class.

        Examples:
            .. code-block:: python

                container.bind(Logger, FileLogger, shared=True)
                container.bind("mailer", lambda c: SmtpMailer(c.make("mail.host")))
                container.bind("mail.host", "smtp.example.com")

        """
        self._registry.bindings[key] = Binding(classify_concrete(key, concrete), shared)
        logger.debug("Bound %r (shared=%s)", key, shared)

    def singleton(self, key: BindingKey, concrete: Any = None) -> None:
        """Register a shared binding; see ``bind``."""
        self.bind(key, concrete, shared=True)

    def bind_factory(self, key: BindingKey, factory: Producer, *, shared: bool = False) -> None:
        """Register a producer that receives call-time arguments.

        ``factory(key, *args, **kwargs)`` calls ``factory(container, *args, **kwargs)``.
        The ``shared`` flag belongs to the factory binding alone.

        Raises:
            KeyWireInvalidRegistrationError: If ``factory`` is not callable.

        """
        ensure_callable(factory, what="Factory")
        self._registry.factories[key] = FactoryBinding(factory, shared)
        logger.debug("Bound factory for %r (shared=%s)", key, shared)

    def singleton_factory(self, key: BindingKey, factory: Producer) -> None:
        self.bind_factory(key, factory, shared=True)

    def register_custom_resolver(
        self,
        key: BindingKey,
        resolver: Callable[[Container], Any],
    ) -> None:
        """Register a resolver that takes precedence over closures and factories.

        The result is cached when ``key`` also has a shared binding.

        Raises:
            KeyWireInvalidRegistrationError: If ``resolver`` is not callable.

        """
        ensure_callable(resolver, what="Custom resolver")
        self._registry.custom_resolvers[key] = resolver

    def alias(self, key: BindingKey, alias: BindingKey) -> None:
        """Make ``alias`` resolve as ``key``. Aliases are a single hop."""
        self._registry.aliases[alias] = key

    def when(
        self,
        consumer: BindingKey,
        callback: Callable[[ContextualBindingBuilder], Any] | None = None,
    ) -> ContextualBindingBuilder:
        """Start contextual bindings for ``consumer``.

        Call ``needs`` on the returned builder, or pass a ``callback`` that
        receives the builder.

        Examples:
            .. code-block:: python

                container.when(ReportService).needs(Storage, S3Storage)
                container.when(
                    ArchiveService,
                    lambda rules: rules.needs(Storage, LocalStorage),
                )

        """
        builder = ContextualBindingBuilder(self, self._registry.resolve_alias(consumer))
        if callback is not None:
            callback(builder)
        return builder

    def _add_contextual_binding(
        self,
        consumer: BindingKey,
        abstract: BindingKey,
        implementation: Any,
    ) -> None:
        abstract = self._registry.resolve_alias(abstract)
        implementation = self._registry.resolve_alias(implementation)
        self._registry.contextual[(consumer, abstract)] = implementation

    def tag(self, tag: str, services: Iterable[BindingKey]) -> None:
        """Append ``services`` to ``tag``, keeping order and duplicates.

        Raises:
            KeyWireInvalidRegistrationError: If ``services`` is a single string.

        """
        if isinstance(services, (str, bytes)):
            msg = f"Tag services must be a collection of keys, got {services!r}."
            raise KeyWireInvalidRegistrationError(msg)
        self._registry.tags[tag].extend(services)

    def get_tagged(self, tag: str) -> list[BindingKey]:
        return self._registry.tagged(tag)

    def make_tagged(self, tag: str) -> list[Any]:
        """Resolve every key tagged with ``tag``, in tag order."""
        return [self.make(key) for key in self._registry.tagged(tag)]

    def add_inflector(self, cls: type[Any], inflector: Callable[[Any], Any]) -> None:
        """Call ``inflector(instance)`` on every autowired instance whose type is exactly ``cls``.

        Raises:
            KeyWireInvalidRegistrationError: If ``cls`` is not a class or
                ``inflector`` is not callable.

        """
        if not inspect.isclass(cls):
            msg = f"Inflector target must be a class, got {cls!r}."
            raise KeyWireInvalidRegistrationError(msg)
        ensure_callable(inflector, what="Inflector")
        self._registry.inflectors[cls].append(inflector)

    def add_service_provider(self, provider_cls: type[ServiceProvider]) -> ServiceProvider:
        """Instantiate ``provider_cls`` with this container and run its ``register``.

        Providers added after ``boot`` are booted right away.
        """
        provider = provider_cls(self)
        self._service_providers.append(provider)
        provider.register()
        logger.debug("Registered service provider %s", provider_cls.__qualname__)

        if self._booted:
            self.boot()
        return provider

    def boot(self) -> None:
        """Call ``boot`` once on every registered service provider."""
        pending = self._service_providers[self._booted_providers :]
        self._booted_providers = len(self._service_providers)
        self._booted = True
        for provider in pending:
            provider.boot()

    def bind_config(self, key: str, value: Any) -> None:
        self._registry.config[key] = value

    def get_config(self, key: str, default: Any = None) -> Any:
        return self._registry.config.get(key, default)

    def share(self, key: BindingKey, instance: Any) -> None:
        """Store a pre-built instance in a side table read by ``get_shared_instance``.

        The side table is not part of ``make`` resolution; use
        ``resolve_with`` to inject an instance into resolution.
        """
        self._registry.shared_instances[key] = instance

    def get_shared_instance(self, key: BindingKey) -> Any | None:
        return self._registry.shared_instances.get(key)

    def resolve_with(self, key: BindingKey, instance: Any) -> None:
        """Force ``instance`` to be returned for ``key`` from now on."""
        self._cache.remember(self._registry.resolve_alias(key), instance)

    def enable_autowiring(self) -> None:
        self._autowire = True

    def disable_autowiring(self) -> None:
        self._autowire = False

    def set_delegate_container(self, container: Container) -> None:
        """Fall back to ``container`` for keys this container has no binding for."""
        self._delegate = container
        logger.debug("Delegate container set to %r", container)

    # Resolution

    def has(self, key: BindingKey) -> bool:
        """Return whether ``key`` is bound here, already resolved, or known to the delegate."""
        real_key = self._registry.resolve_alias(key)
        if self._registry.knows(real_key) or self._cache.is_resolved(real_key):
            return True
        return self._delegate is not None and self._delegate.has(real_key)

    @overload
    def make(self, key: type[T], context: BindingKey = None) -> T: ...

    @overload
    def make(self, key: BindingKey, context: BindingKey = None) -> Any: ...

    def make(self, key: BindingKey, context: BindingKey = None) -> Any:
        """Resolve ``key`` to a value.

        Args:
            key: Key or alias to resolve.
            context: Consumer the value is resolved for; selects contextual
                bindings registered with ``when(context)``. The autowirer
                passes the binding key it is building for, or the class.

        Raises:
            KeyWireUnresolvedBindingError: If nothing can produce ``key`` and
                autowiring is disabled.
            KeyWireClassNotFoundError: If autowiring is enabled and ``key`` is
                not a class or an importable class path.
            KeyWireNonInstantiableError: If the class to build is abstract.
            KeyWireCircularDependencyError: If ``key`` depends on itself.

        """
        real_key = self._registry.resolve_alias(key)

        binding = self._registry.bindings.get(real_key)
        if binding is not None and isinstance(binding.concrete, LiteralConcrete):
            return binding.concrete.value

        implementation = self._registry.contextual_implementation(
            self._registry.resolve_alias(context),
            real_key,
        )
        if implementation is not None:
            return self._build_contextual(implementation)

        if self._cache.is_resolved(real_key):
            return self._cache.resolved[real_key]

        with self._stack.enter(real_key):
            return self._produce(real_key, context=context, call_args=None)

    @overload
    def factory(self, key: type[T], /, *args: Any, **kwargs: Any) -> T: ...

    @overload
    def factory(self, key: BindingKey, /, *args: Any, **kwargs: Any) -> Any: ...

    def factory(self, key: BindingKey, /, *args: Any, **kwargs: Any) -> Any:
        """Resolve ``key``, passing call-time arguments to its factory binding.

        Mirrors ``make`` without the literal short-circuit and without
        contextual bindings; factory bindings are checked right after closures.

        Examples:
            .. code-block:: python

                container.bind_factory("report", lambda c, title: Report(c.make(Pdf), title))
                report = container.factory("report", "Q3")

        """
        real_key = self._registry.resolve_alias(key)

        if self._cache.is_resolved(real_key):
            return self._cache.resolved[real_key]

        with self._stack.enter(real_key):
            return self._produce(real_key, context=None, call_args=(args, kwargs))

    def resolve_method(self, instance: Any, method_name: str) -> Any:
        """Call ``instance.method_name`` with its parameters resolved from the container.

        Raises:
            KeyWireMethodNotFoundError: If the attribute is missing or not callable.

        """
        method = getattr(instance, method_name, None)
        if method is None or not callable(method):
            raise KeyWireMethodNotFoundError(instance, method_name)
        return self._autowirer.call(method, owner=type(instance))

    def _produce(
        self,
        real_key: BindingKey,
        *,
        context: BindingKey,
        call_args: _CallArgs | None,
    ) -> Any:
        binding = self._registry.bindings.get(real_key)

        resolver = self._registry.custom_resolvers.get(real_key)
        if resolver is not None:
            return self._share_if(self._registry.is_shared(real_key), real_key, resolver(self))

        if binding is not None and isinstance(binding.concrete, ProducerConcrete):
            return self._share_if(binding.shared, real_key, binding.concrete.producer(self))

        if call_args is not None:
            factory_binding = self._registry.factories.get(real_key)
            if factory_binding is not None:
                args, kwargs = call_args
                instance = factory_binding.factory(self, *args, **kwargs)
                return self._share_if(factory_binding.shared, real_key, instance)

        if binding is not None:
            return self._share_if(binding.shared, real_key, self._instantiate(real_key, binding))

        if self._delegate is not None and self._delegate.has(real_key):
            if call_args is None:
                return self._delegate.make(real_key, context)
            args, kwargs = call_args
            return self._delegate.factory(real_key, *args, **kwargs)

        if self._autowire:
            return self._autowire_key(real_key)

        raise KeyWireUnresolvedBindingError(real_key)

    def _share_if(self, shared: bool, real_key: BindingKey, instance: Any) -> Any:  # noqa: FBT001
        if shared:
            self._cache.remember(real_key, instance)
        return instance

    def _instantiate(self, real_key: BindingKey, binding: Binding) -> Any:
        concrete = binding.concrete
        if isinstance(concrete, TypeConcrete):
            if binding.shared:
                return self._cache.get_shared(
                    real_key,
                    lambda: self._autowirer.build(concrete.cls, consumer=real_key),
                )
            return self._autowirer.build(concrete.cls, consumer=real_key)
        if isinstance(concrete, InstanceConcrete):
            return concrete.instance
        if isinstance(concrete, LiteralConcrete):
            return concrete.value
        # closures are handled before regular bindings
        return concrete.producer(self)  # pragma: no cover

    def _build_contextual(self, implementation: Any) -> Any:
        if not inspect.isclass(implementation):
            return self.make(implementation)
        with self._stack.enter(implementation):
            return self._autowirer.build(implementation)

    def _autowire_key(self, real_key: BindingKey) -> Any:
        target = self._load_class(real_key)
        if is_pydantic_settings_subclass(target):
            # settings read their fields from the environment, not the container
            settings = target()
            self._autowirer.initialize(settings, consumer=real_key)
            return self._cache.remember(real_key, settings)
        return self._autowirer.build(target, consumer=real_key)

    def _load_class(self, key: BindingKey) -> type[Any]:
        """Return the class ``key`` denotes: itself, or an importable ``"pkg.mod:Class"`` path."""
        if inspect.isclass(key):
            return key
        if not isinstance(key, str) or not ("." in key or ":" in key):
            raise KeyWireClassNotFoundError(key)

        try:
            target = pkgutil.resolve_name(key)
        except (ImportError, AttributeError, ValueError) as exc:
            raise KeyWireClassNotFoundError(key) from exc

        if not inspect.isclass(target):
            raise KeyWireClassNotFoundError(key)
        return target
