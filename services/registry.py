"""
Service Registry with lazy loading
Resolves repositories and other collaborators by name, with dependency injection
"""
from typing import Dict, Any, Callable, Optional, Set, List
from enum import Enum
import threading
import logging

logger = logging.getLogger(__name__)


class ServiceLifecycle(Enum):
    """Service lifecycle management options"""
    SINGLETON = "singleton"  # Single instance per application
    TRANSIENT = "transient"  # New instance per lookup


class ServiceDescriptor:
    """Describes a service registration"""
    
    def __init__(
        self,
        name: str,
        factory: Optional[Callable] = None,
        instance: Optional[Any] = None,
        lifecycle: ServiceLifecycle = ServiceLifecycle.SINGLETON,
        dependencies: Optional[List[str]] = None
    ):
        self.name = name
        self.factory = factory
        self.instance = instance
        self.lifecycle = lifecycle
        self.dependencies = dependencies or []
        self.lock = threading.Lock()


class ServiceRegistry:
    """
    Service registry with lazy loading.
    
    Features:
    - Lazy loading with factory pattern
    - Dependency resolution
    - Singleton and transient lifecycles
    - Thread-safe singleton initialization
    - Circular dependency detection
    """
    
    def __init__(self):
        self._descriptors: Dict[str, ServiceDescriptor] = {}
        self._thread_local = threading.local()
        self._lock = threading.Lock()
    
    def register(
        self,
        name: str,
        service: Any = None,
        factory: Callable = None,
        lifecycle: ServiceLifecycle = ServiceLifecycle.SINGLETON,
        dependencies: Optional[List[str]] = None
    ) -> None:
        """
        Register a service instance or a factory.
        
        Registering a name again replaces the previous registration, which is
        how tests swap a repository for a configured or mocked one.
        
        Args:
            name: Service identifier
            service: Pre-instantiated service
            factory: Factory function for lazy loading
            lifecycle: Service lifecycle type
            dependencies: List of service names the factory receives as kwargs
        """
        if service is None and factory is None:
            raise ValueError(f"Either service instance or factory must be provided for '{name}'")
        
        descriptor = ServiceDescriptor(
            name=name,
            factory=factory,
            instance=service,
            lifecycle=lifecycle,
            dependencies=dependencies
        )
        
        with self._lock:
            self._descriptors[name] = descriptor
    
    def register_factory(
        self,
        name: str,
        factory: Callable,
        lifecycle: ServiceLifecycle = ServiceLifecycle.SINGLETON,
        dependencies: Optional[List[str]] = None
    ) -> None:
        """Register a factory function for lazy service instantiation"""
        self.register(name=name, factory=factory, lifecycle=lifecycle, dependencies=dependencies)
    
    def register_singleton(self, name: str, factory: Callable, **kwargs) -> None:
        """Register a singleton service factory"""
        self.register_factory(name, factory, ServiceLifecycle.SINGLETON, **kwargs)
    
    def register_transient(self, name: str, factory: Callable, **kwargs) -> None:
        """Register a transient service factory"""
        self.register_factory(name, factory, ServiceLifecycle.TRANSIENT, **kwargs)
    
    def get(self, name: str) -> Any:
        """
        Get a service by name with lazy loading and dependency resolution.
        
        Raises:
            ValueError: If service is not registered
            RuntimeError: If circular dependency detected
        """
        if name not in self._descriptors:
            raise ValueError(f"Service '{name}' is not registered")
        
        descriptor = self._descriptors[name]
        stack = self._initialization_stack()
        
        if name in stack:
            cycle = " -> ".join(stack + [name])
            raise RuntimeError(f"Circular dependency detected: {cycle}")
        
        if descriptor.lifecycle == ServiceLifecycle.TRANSIENT:
            return self._create_instance(descriptor)
        return self._get_singleton(descriptor)
    
    def _initialization_stack(self) -> List[str]:
        if not hasattr(self._thread_local, 'initialization_stack'):
            self._thread_local.initialization_stack = []
        return self._thread_local.initialization_stack
    
    def _get_singleton(self, descriptor: ServiceDescriptor) -> Any:
        """Get or create singleton instance"""
        if descriptor.instance is not None:
            return descriptor.instance
        
        with descriptor.lock:
            # Double-check pattern
            if descriptor.instance is None:
                descriptor.instance = self._create_instance(descriptor)
            return descriptor.instance
    
    def _create_instance(self, descriptor: ServiceDescriptor) -> Any:
        """Create a new service instance"""
        if descriptor.factory is None:
            raise ValueError(f"No factory registered for '{descriptor.name}'")
        
        stack = self._initialization_stack()
        stack.append(descriptor.name)
        try:
            deps = {dep: self.get(dep) for dep in descriptor.dependencies}
            instance = descriptor.factory(**deps)
            logger.debug(f"Created service instance: {descriptor.name}")
            return instance
        finally:
            stack.pop()
    
    def has(self, name: str) -> bool:
        """Check if a service is registered"""
        return name in self._descriptors
    
    def reset_service(self, name: str) -> None:
        """Reset a specific service, forcing re-instantiation on next get"""
        if name in self._descriptors:
            descriptor = self._descriptors[name]
            if descriptor.factory is not None:
                with descriptor.lock:
                    descriptor.instance = None
    
    def list_services(self) -> List[str]:
        """List all registered service names"""
        return sorted(self._descriptors.keys())
    
    def validate_dependencies(self) -> List[str]:
        """
        Validate all service dependencies are registered.
        
        Returns:
            List of validation errors (empty if valid)
        """
        errors = []
        for name, descriptor in self._descriptors.items():
            for dep in descriptor.dependencies:
                if dep not in self._descriptors:
                    errors.append(f"Service '{name}' depends on unregistered service '{dep}'")
        return errors
    
    def get_initialization_order(self) -> List[str]:
        """
        Calculate the initialization order based on dependencies (topological sort).
        
        Raises:
            RuntimeError: If circular dependency exists
        """
        graph = {name: d.dependencies for name, d in self._descriptors.items()}
        visited: Set[str] = set()
        order: List[str] = []
        
        def visit(node: str, path: List[str]):
            if node in path:
                cycle = " -> ".join(path + [node])
                raise RuntimeError(f"Circular dependency detected: {cycle}")
            if node in visited:
                return
            for dep in graph.get(node, []):
                visit(dep, path + [node])
            visited.add(node)
            order.append(node)
        
        for name in graph:
            visit(name, [])
        
        return order
