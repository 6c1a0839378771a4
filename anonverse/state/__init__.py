"""
Client-side state reconciliation.

Contents
--------
- access
    `AccessTier` resolution from (session present, guest flag) and the
    capability gate (`allowed`, `require`) consulted by every mutation.
- device_state
    `LocalDeviceState`: the device-local guest flag.
- session_store
    `SessionStore`: current identity, fed by the provider's session events.
- feed
    `FeedAggregator`: poems + authors + engagement counts + viewer likes.
- mutations
    `OptimisticMutationEngine`: like/unlike, comments, poem creation.
- social_graph
    `SocialGraphTracker`: follower/following counts and follow actions.
- profiles
    `ProfileDirectory`: profile lookup and owner edits.
"""
