"""
Task subsystem.

Components:
- task_models.py: data structures (TaskConfig, TaskHandle, FormAction, RunOutcome)
- task_runner.py: the time-paced, cancellable run itself
- task_controller.py: owns the single task slot and dispatches button presses
"""
