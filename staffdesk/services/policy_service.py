from staffdesk.models.company_policy import CompanyPolicy
from staffdesk.models.profile import Capability
from staffdesk.schemas.policy import CompanyPolicyUpdate
from staffdesk.core.exceptions import ValidationFailed
from staffdesk.services.base import BaseService


class PolicyService(BaseService):
    """Read/update access to the single company policy row."""

    def get_policy(self) -> CompanyPolicy:
        policy = self.query_guard(
            "policy lookup",
            lambda: self.db.query(CompanyPolicy).order_by(CompanyPolicy.id).first(),
        )
        if policy is None:
            policy = self.ensure_default()
        return policy

    def ensure_default(self) -> CompanyPolicy:
        policy = CompanyPolicy()
        self.db.add(policy)
        self.commit("default policy creation")
        self.db.refresh(policy)
        self.log_info("Created default company policy")
        return policy

    def update_policy(self, update: CompanyPolicyUpdate) -> CompanyPolicy:
        self.actor.require(Capability.MANAGE_POLICY)
        policy = self.get_policy()

        changes = update.model_dump(exclude_unset=True, exclude_none=True)
        start = changes.get("office_start_time", policy.office_start_time)
        end = changes.get("office_end_time", policy.office_end_time)
        if start >= end:
            raise ValidationFailed("Office start time must be before office end time")

        for field, value in changes.items():
            setattr(policy, field, value)
        policy.updated_by = self.actor.user_id
        self.commit("policy update")
        self.db.refresh(policy)
        self.log_info("Company policy updated", updated_by=self.actor.user_id, fields=sorted(changes))
        return policy
