# (c) Copyright IBM Corp. 2025

from typing import Dict, Optional, Sequence, Tuple, Type

from tracewire.log import logger
from tracewire.options import Options
from tracewire.propagators.baggage_propagator import BaggagePropagator
from tracewire.propagators.base_propagator import (
    BasePropagator,
    CarrierT,
    PropagatedContext,
)
from tracewire.propagators.tracecontext_propagator import TraceContextPropagator

PROPAGATORS: Dict[str, Type[BasePropagator]] = {
    TraceContextPropagator.NAME: TraceContextPropagator,
    BaggagePropagator.NAME: BaggagePropagator,
}


class CompositePropagator(BasePropagator):
    """Runs several propagators over the same carrier, in order."""

    NAME = "composite"

    def __init__(self, propagators: Sequence[BasePropagator]) -> None:
        self.propagators: Tuple[BasePropagator, ...] = tuple(propagators)
        self.FIELDS = tuple(
            field for propagator in self.propagators for field in propagator.fields()
        )

    def inject(self, context: PropagatedContext, carrier: CarrierT) -> None:
        for propagator in self.propagators:
            propagator.inject_context(context, carrier)

    def extract(
        self, carrier: CarrierT, context: Optional[PropagatedContext] = None
    ) -> PropagatedContext:
        if context is None:
            context = PropagatedContext()
        for propagator in self.propagators:
            context = propagator.extract_context(context, carrier)
        return context

    def inject_context(self, context: PropagatedContext, carrier: CarrierT) -> None:
        self.inject(context, carrier)

    def extract_context(
        self, context: PropagatedContext, carrier: CarrierT
    ) -> PropagatedContext:
        return self.extract(carrier, context)


def create_propagator(name: str) -> BasePropagator:
    try:
        return PROPAGATORS[name]()
    except KeyError:
        raise ValueError(f"Unknown propagator: {name}") from None


def default_propagator(options: Optional[Options] = None) -> CompositePropagator:
    """
    Builds the composite propagator named by options.propagators.

    :param options: Options, read from the environment when not given
    :return: CompositePropagator
    """
    if options is None:
        options = Options()
    propagators = [
        create_propagator(name) for name in options.propagators if name in PROPAGATORS
    ]
    logger.debug(f"Using propagators: {[p.NAME for p in propagators]}")
    return CompositePropagator(propagators)
