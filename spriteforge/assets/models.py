"""
Generated asset models.

Everything an import produces is a pydantic model so the asset store can
persist it as JSON and load it back on the next import:

- Sprite / SpriteSheet: atlas sub-images (produced by the atlas generator)
- MotionClip: sprite keyframe tracks + timeline events, one per frame tag
- AnimationGraph: layers of nested state machines holding named states
- SceneNode / SceneTemplate: the node hierarchy with renderer components

Assets carry a stable ``guid``; references between assets use store paths.
"""

from enum import Enum
from typing import Annotated, Any, ClassVar, Iterator, Literal, Optional, Union
import uuid

from pydantic import BaseModel, ConfigDict, Field


class Asset(BaseModel):
    """Base model for persisted assets."""

    model_config = ConfigDict(
        populate_by_name=True,
        validate_assignment=False,
        extra='ignore',
        use_enum_values=False,
    )

    VERSION: ClassVar[int] = 1

    version: int = Field(default=1, alias='_version')
    type_name: str = Field(default='Asset', alias='_type')
    guid: str = Field(default_factory=lambda: str(uuid.uuid4()))

    def model_post_init(self, __context: Any) -> None:
        """Set type_name to the actual class name."""
        self.type_name = self.__class__.__name__

    def to_api_dict(self) -> dict[str, Any]:
        """Serialize with camelCase keys."""
        self.version = self.VERSION
        return self.model_dump(by_alias=True, mode='json')


# =============================================================================
# Atlas
# =============================================================================

class Sprite(BaseModel):
    """A sub-image of an atlas."""

    model_config = ConfigDict(populate_by_name=True, extra='ignore')

    name: str
    atlas: str = Field(default='')  # atlas image path
    x: int = Field(default=0, ge=0)
    y: int = Field(default=0, ge=0)
    width: int = Field(default=0, ge=0)
    height: int = Field(default=0, ge=0)
    pivot_x: float = Field(default=0.5, alias='pivotX')
    pivot_y: float = Field(default=0.5, alias='pivotY')


class SpriteSheet(Asset):
    """Sprite metadata of one atlas image, in frame id order."""

    atlas: str = Field(default='')
    width: int = Field(default=0, ge=0)
    height: int = Field(default=0, ge=0)
    sprites: list[Sprite] = Field(default_factory=list)


# =============================================================================
# Motion clips
# =============================================================================

class WrapMode(str, Enum):
    """Clip wrap modes."""
    CLAMP = "clamp"
    LOOP = "loop"


class Keyframe(BaseModel):
    """A sprite reference at a point in time (seconds)."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    time: float
    sprite: str


class SpriteCurve(BaseModel):
    """Sprite keyframe track bound to a scene path."""

    model_config = ConfigDict(populate_by_name=True, extra='ignore')

    path: str
    component: str = Field(default='SpriteRenderer')
    property_name: str = Field(default='sprite', alias='propertyName')
    keyframes: list[Keyframe] = Field(default_factory=list)


class ClipEvent(BaseModel):
    """A discrete timeline event."""

    model_config = ConfigDict(populate_by_name=True, extra='ignore')

    time: float
    function_name: str = Field(alias='functionName')
    parameter: Optional[Any] = Field(default=None)


class MotionClip(Asset):
    """
    Time-keyed motion clip.

    Serialization format:
    {
        "_version": 1,
        "_type": "MotionClip",
        "guid": "uuid",
        "name": "hero_walk",
        "frameRate": 60.0,
        "wrapMode": "loop",
        "loopTime": true,
        "loopBlend": true,
        "curves": [{"path": "Sprites/Body", "keyframes": [...]}],
        "events": []
    }
    """

    name: str = Field(default='Clip')
    frame_rate: float = Field(default=60.0, gt=0, alias='frameRate')

    wrap_mode: WrapMode = Field(default=WrapMode.CLAMP, alias='wrapMode')
    loop_time: bool = Field(default=False, alias='loopTime')
    loop_blend: bool = Field(default=False, alias='loopBlend')

    curves: list[SpriteCurve] = Field(default_factory=list)
    events: list[ClipEvent] = Field(default_factory=list)

    @property
    def length(self) -> float:
        """Time of the last keyframe in any track, in seconds."""
        times = [kf.time for curve in self.curves for kf in curve.keyframes]
        return max(times, default=0.0)

    def set_looping(self, loop: bool) -> None:
        """Apply loop or clamp semantics."""
        self.wrap_mode = WrapMode.LOOP if loop else WrapMode.CLAMP
        self.loop_time = loop
        self.loop_blend = loop

    def get_curve(self, path: str, property_name: str = 'sprite') -> Optional[SpriteCurve]:
        """
        Get a track by binding.

        Args:
            path: Scene path the track animates
            property_name: Animated property

        Returns:
            SpriteCurve or None if the clip has no such track
        """
        for curve in self.curves:
            if curve.path == path and curve.property_name == property_name:
                return curve
        return None

    def set_sprite_curve(self, path: str, keyframes: list[Keyframe]) -> SpriteCurve:
        """
        Replace the sprite track of a path, leaving all other tracks alone.

        Args:
            path: Scene path the track animates
            keyframes: New keyframes

        Returns:
            The track holding the keyframes
        """
        curve = self.get_curve(path)
        if curve is None:
            curve = SpriteCurve(path=path)
            self.curves.append(curve)
        curve.keyframes = list(keyframes)
        return curve

    def add_event(self, event: ClipEvent) -> None:
        """Add a timeline event, keeping events sorted by time."""
        self.events.append(event)
        self.events.sort(key=lambda e: e.time)

    def clear_events(self) -> None:
        """Remove all timeline events."""
        self.events = []


# =============================================================================
# Animation graph
# =============================================================================

class Transition(BaseModel):
    """A transition from the owning state to another state."""

    model_config = ConfigDict(populate_by_name=True, extra='ignore')

    destination: str  # state name
    has_exit_time: bool = Field(default=True, alias='hasExitTime')
    exit_time: float = Field(default=1.0, alias='exitTime')
    duration: float = Field(default=0.0, ge=0.0)
    conditions: list[dict[str, Any]] = Field(default_factory=list)


class GraphState(BaseModel):
    """Named state, optionally playing a motion clip."""

    model_config = ConfigDict(populate_by_name=True, extra='ignore')

    name: str
    motion: Optional[str] = Field(default=None)  # clip asset path
    speed: float = Field(default=1.0)
    transitions: list[Transition] = Field(default_factory=list)

    def add_transition(self, destination: str, **kwargs: Any) -> Transition:
        """Add a transition to the named destination state."""
        transition = Transition(destination=destination, **kwargs)
        self.transitions.append(transition)
        return transition


class StateMachine(BaseModel):
    """State machine holding states and nested sub-machines."""

    model_config = ConfigDict(populate_by_name=True, extra='ignore')

    name: str = Field(default='Base Layer')
    states: list[GraphState] = Field(default_factory=list)
    state_machines: list['StateMachine'] = Field(default_factory=list, alias='stateMachines')
    default_state: Optional[str] = Field(default=None, alias='defaultState')

    def add_state(self, name: str, motion: Optional[str] = None) -> GraphState:
        """
        Add a state to this machine.

        The first state added becomes the default state.

        Args:
            name: State name
            motion: Optional clip asset path

        Returns:
            The new state
        """
        state = GraphState(name=name, motion=motion)
        self.states.append(state)
        if self.default_state is None:
            self.default_state = name
        return state

    def add_state_machine(self, name: str) -> 'StateMachine':
        """Add a nested sub-machine."""
        machine = StateMachine(name=name)
        self.state_machines.append(machine)
        return machine

    def walk_states(self) -> Iterator[GraphState]:
        """
        Iterate all states, pre-order.

        Own states come first, then each nested sub-machine in order.
        """
        yield from self.states
        for machine in self.state_machines:
            yield from machine.walk_states()


class GraphLayer(BaseModel):
    """A layer of an animation graph."""

    model_config = ConfigDict(populate_by_name=True, extra='ignore')

    name: str = Field(default='Base Layer')
    weight: float = Field(default=1.0, ge=0.0, le=1.0)
    state_machine: StateMachine = Field(default_factory=StateMachine, alias='stateMachine')


class AnimationGraph(Asset):
    """
    Named-state animation graph.

    Serialization format:
    {
        "_version": 1,
        "_type": "AnimationGraph",
        "guid": "uuid",
        "name": "hero",
        "parameters": [],
        "layers": [{"name": "Base Layer", "stateMachine": {...}}]
    }
    """

    name: str = Field(default='Graph')
    parameters: list[dict[str, Any]] = Field(default_factory=list)
    layers: list[GraphLayer] = Field(default_factory=list)

    def model_post_init(self, __context: Any) -> None:
        """Set type_name and make sure a base layer exists."""
        super().model_post_init(__context)
        if not self.layers:
            self.layers.append(GraphLayer())

    def find_state(self, name: str) -> Optional[GraphState]:
        """Find the first state with a name in pre-order over the first layer."""
        for state in self.layers[0].state_machine.walk_states():
            if state.name == name:
                return state
        return None

    def state_names(self) -> list[str]:
        """Names of all states of the first layer, pre-order."""
        return [state.name for state in self.layers[0].state_machine.walk_states()]


# =============================================================================
# Scene nodes
# =============================================================================

class Vector3(BaseModel):
    """Position in scene space."""
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0


class SpriteRendererComponent(BaseModel):
    """Renders one sprite."""

    model_config = ConfigDict(populate_by_name=True, extra='ignore')

    type: Literal['sprite_renderer'] = 'sprite_renderer'
    sprite: Optional[str] = Field(default=None)
    sorting_layer_id: int = Field(default=0, alias='sortingLayerId')
    sorting_order: int = Field(default=0, alias='sortingOrder')


class AnimatorComponent(BaseModel):
    """Plays an animation graph."""

    model_config = ConfigDict(populate_by_name=True, extra='ignore')

    type: Literal['animator'] = 'animator'
    controller: Optional[str] = Field(default=None)  # graph asset path


Component = Annotated[
    Union[SpriteRendererComponent, AnimatorComponent],
    Field(discriminator='type'),
]


class SceneNode(BaseModel):
    """A node of the scene hierarchy."""

    model_config = ConfigDict(populate_by_name=True, extra='ignore')

    name: str
    position: Vector3 = Field(default_factory=Vector3)
    components: list[Component] = Field(default_factory=list)
    children: list['SceneNode'] = Field(default_factory=list)

    def add_child(self, node: 'SceneNode') -> 'SceneNode':
        """Parent a node under this one."""
        self.children.append(node)
        return node

    def add_component(self, component: BaseModel) -> BaseModel:
        """Attach a component."""
        self.components.append(component)
        return component

    def get_component(self, component_type: type) -> Optional[Any]:
        """Get the first component of a type."""
        for component in self.components:
            if isinstance(component, component_type):
                return component
        return None

    def find(self, path: str) -> Optional['SceneNode']:
        """
        Find a descendant by slash-separated path of names.

        Args:
            path: Path relative to this node, e.g. 'Sprites/Body'

        Returns:
            SceneNode or None if not found
        """
        node = self
        for name in path.split('/'):
            node = next((child for child in node.children if child.name == name), None)
            if node is None:
                return None
        return node

    def walk(self) -> Iterator['SceneNode']:
        """Iterate this node and all descendants, pre-order."""
        yield self
        for child in self.children:
            yield from child.walk()


class SceneTemplate(Asset):
    """Persisted, reusable node hierarchy."""

    root: SceneNode
